"""
Transfer order endpoint.

Validates the form, composes the PDF and returns it as a download.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Response

from virement.api.deps import get_order_service
from virement.api.schemas import ErrorResponse, GenerateOrderRequest
from virement.domain.errors import ValidationError
from virement.domain.models import Currency
from virement.services.generation import TransferOrderService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post(
    "",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}, "description": "Transfer order PDF"},
        400: {"model": ErrorResponse, "description": "Letterhead file is corrupt"},
        404: {"model": ErrorResponse, "description": "Unknown account or supplier"},
        409: {"model": ErrorResponse, "description": "Another order is being generated"},
        422: {"model": ErrorResponse, "description": "Form validation error"},
        500: {"model": ErrorResponse, "description": "PDF generation failed"},
    },
)
async def generate_order(
    form: GenerateOrderRequest,
    service: Annotated[TransferOrderService, Depends(get_order_service)],
) -> Response:
    """
    Generate a transfer order PDF.
    
    **Process:**
    1. Resolve payer account and supplier
    2. Validate amount and purpose
    3. Print over the account letterhead, or on the built-in template
    4. Return the PDF as `ordre_virement_<supplier>.pdf`
    """
    try:
        currency = Currency.from_code(form.currency)
    except ValueError:
        raise ValidationError("currency", f"Devise non prise en charge : {form.currency}")

    result = await service.generate(
        payer_account_id=form.payer_account_id,
        beneficiary_id=form.beneficiary_id,
        amount=form.amount,
        purpose=form.purpose,
        express=form.express,
        currency=currency,
    )

    logger.info(f"Serving {result.exported.filename} ({result.composer} composer)")
    return Response(
        content=result.exported.content,
        media_type=result.exported.media_type,
        headers=result.exported.headers,
    )
