"""
FastAPI dependencies.

The generation service lives on ``app.state`` so its busy flag and
directory are owned by the application instance, not by module globals.
"""

from fastapi import Request

from virement.infrastructure.directory import AccountDirectory
from virement.services.generation import TransferOrderService


def get_order_service(request: Request) -> TransferOrderService:
    """Generation service of the running application."""
    return request.app.state.order_service


def get_directory(request: Request) -> AccountDirectory:
    """Account directory of the running application."""
    return request.app.state.order_service.directory
