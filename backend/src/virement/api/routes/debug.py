"""
Debug endpoints for development and testing.

These endpoints are only available when DEBUG=true.
"""

import logging

from fastapi import APIRouter, HTTPException, status

from virement.api.schemas import AmountWordsResponse
from virement.config import get_settings
from virement.domain.models import Currency
from virement.domain.numerals import amount_to_words

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/debug", tags=["debug"])


@router.get("/words", response_model=AmountWordsResponse)
async def debug_words(amount: str, currency: str = "MAD") -> AmountWordsResponse:
    """
    Spell an amount the way it is printed on transfer orders.
    
    Only available in debug mode.
    """
    settings = get_settings()
    if not settings.debug:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Debug endpoints are disabled in production",
        )
    
    try:
        unit = Currency.from_code(currency)
        words = amount_to_words(amount.replace(",", "."), unit.main_unit, unit.sub_unit)
    except (ValueError, ArithmeticError) as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Cannot spell amount: {e}",
        )
    
    return AmountWordsResponse(amount=amount, currency=unit.code, words=words)
