"""
Health check endpoint.

Provides system health status for monitoring and load balancers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from virement import __version__
from virement.api.deps import get_order_service
from virement.api.schemas import HealthResponse
from virement.services.generation import TransferOrderService

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: Annotated[TransferOrderService, Depends(get_order_service)],
) -> HealthResponse:
    """
    Check system health.
    
    Returns directory sizes and whether an order is being generated.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        accounts=service.directory.account_count,
        suppliers=service.directory.supplier_count,
        generating=service.busy,
    )
