"""
FastAPI application entry point.

This is the main application that ties together all components:
- API routes for accounts, suppliers and transfer orders
- The generation service and its account directory
- CORS configuration for frontend access
- Error handling and logging
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from virement import __version__
from virement.api.routes import accounts, debug, health, orders
from virement.config import get_settings
from virement.domain.errors import (
    CompositionError,
    GenerationInProgressError,
    MalformedLetterheadError,
    TransferOrderError,
    UnknownRecordError,
    ValidationError,
)
from virement.infrastructure.directory import AccountDirectory
from virement.services.generation import TransferOrderService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)


CORRUPT_LETTERHEAD_MESSAGE = (
    "Une erreur est survenue lors de la génération du PDF. "
    "Le fichier papier à en-tête est peut-être corrompu ou dans un format incorrect."
)
GENERATION_FAILED_MESSAGE = "Une erreur est survenue lors de la génération du PDF."


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Logs configuration on startup and shutdown.
    """
    settings = get_settings()
    service: TransferOrderService = app.state.order_service

    logger.info(f"Starting Virement v{__version__}")
    logger.info(f"Organization: {settings.organization_name} ({settings.city})")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(
        f"Directory: {service.directory.account_count} accounts, "
        f"{service.directory.supplier_count} suppliers"
    )

    yield  # Application runs here

    logger.info("Shutting down Virement")


def _error_body(error: str, exc: TransferOrderError, code: str, detail: str | None = None) -> dict:
    return {
        "error": error,
        "detail": detail or exc.message,
        "code": code,
        "field": exc.context.get("field"),
    }


def create_app(directory: AccountDirectory | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        directory: Accounts and suppliers to serve. Built-in defaults if None.

    Returns:
        Configured FastAPI instance ready to serve requests.
    """
    settings = get_settings()

    app = FastAPI(
        title="Virement API",
        description=(
            "Bank transfer order generator.\n\n"
            "Builds print-ready transfer order letters (PDF) either over an "
            "account letterhead or on a branded template."
        ),
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.order_service = TransferOrderService(
        directory=directory or AccountDirectory.with_defaults(),
    )

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(accounts.router, prefix="/api/v1")
    app.include_router(orders.router, prefix="/api/v1")

    # Debug router (only in debug mode)
    if settings.debug:
        app.include_router(debug.router, prefix="/api/v1")

    @app.exception_handler(ValidationError)
    async def validation_error_handler(request: Request, exc: ValidationError):
        """Form rejected before any composition."""
        logger.info(f"Order rejected: {exc}")
        return JSONResponse(
            status_code=422,
            content=_error_body("Validation Error", exc, "validation_error"),
        )

    @app.exception_handler(UnknownRecordError)
    async def unknown_record_handler(request: Request, exc: UnknownRecordError):
        return JSONResponse(
            status_code=404,
            content=_error_body("Not Found", exc, f"unknown_{exc.kind}"),
        )

    @app.exception_handler(GenerationInProgressError)
    async def busy_handler(request: Request, exc: GenerationInProgressError):
        return JSONResponse(
            status_code=409,
            content=_error_body("Conflict", exc, "generation_in_progress"),
        )

    @app.exception_handler(CompositionError)
    async def composition_error_handler(request: Request, exc: CompositionError):
        """Composition aborted; no partial document is returned."""
        if isinstance(exc, MalformedLetterheadError):
            return JSONResponse(
                status_code=400,
                content=_error_body(
                    "Malformed Letterhead",
                    exc,
                    "malformed_letterhead",
                    detail=CORRUPT_LETTERHEAD_MESSAGE,
                ),
            )

        return JSONResponse(
            status_code=500,
            content=_error_body(
                "Composition Error",
                exc,
                "composition_error",
                detail=str(exc) if settings.debug else GENERATION_FAILED_MESSAGE,
            ),
        )

    @app.exception_handler(TransferOrderError)
    async def transfer_order_error_handler(request: Request, exc: TransferOrderError):
        """Remaining domain errors (e.g. an invalid RIB) are client errors."""
        return JSONResponse(
            status_code=422,
            content=_error_body("Unprocessable Entity", exc, type(exc).__name__),
        )

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Catch-all exception handler for unhandled errors."""
        logger.exception(f"Unhandled error: {exc}")

        # Don't expose internal errors in production
        if settings.debug:
            detail = str(exc)
        else:
            detail = "An internal error occurred"

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": detail,
            },
        )

    return app


# Create the application instance
app = create_app()


# Development server entry point
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "virement.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
