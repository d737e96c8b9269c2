"""
Account and supplier endpoints.

Read access to the directory for the order form, plus letterhead
upload for payer accounts.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from virement.api.deps import get_directory
from virement.api.schemas import AccountResponse, SupplierResponse
from virement.config import get_settings
from virement.domain.errors import MalformedLetterheadError
from virement.domain.models import Letterhead
from virement.infrastructure.directory import AccountDirectory
from virement.services.composer.overlay import load_first_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["accounts"])

ALLOWED_LETTERHEAD_TYPES = {"application/pdf", "application/x-pdf", "application/octet-stream"}
CORRUPT_UPLOAD_MESSAGE = (
    "Le fichier papier à en-tête est corrompu ou n'est pas un PDF lisible. "
    "Veuillez importer un autre fichier."
)


@router.get("/accounts", response_model=list[AccountResponse])
async def list_accounts(
    directory: Annotated[AccountDirectory, Depends(get_directory)],
) -> list[AccountResponse]:
    """Payer accounts sorted by company name."""
    return [AccountResponse.from_domain(a) for a in directory.list_accounts()]


@router.get("/suppliers", response_model=list[SupplierResponse])
async def list_suppliers(
    directory: Annotated[AccountDirectory, Depends(get_directory)],
    search: str | None = None,
) -> list[SupplierResponse]:
    """Suppliers, optionally filtered by a case-insensitive name search."""
    return [SupplierResponse.from_domain(s) for s in directory.search_beneficiaries(search)]


@router.post(
    "/accounts/{account_id}/letterhead",
    response_model=AccountResponse,
    responses={
        400: {"description": "Empty, non-PDF or corrupt letterhead"},
        404: {"description": "Account not found"},
        413: {"description": "Letterhead too large"},
    },
)
async def upload_letterhead(
    account_id: str,
    directory: Annotated[AccountDirectory, Depends(get_directory)],
    file: Annotated[UploadFile, File(description="Letterhead PDF (first page is used)")],
) -> AccountResponse:
    """
    Attach a letterhead PDF to a payer account.

    Orders for this account are then printed over the first page of the
    letterhead instead of the built-in template.
    """
    settings = get_settings()

    # Validate file type
    if file.content_type and file.content_type not in ALLOWED_LETTERHEAD_TYPES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid file type: {file.content_type}. Allowed: PDF",
        )

    content = await file.read()
    if not content:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="File is empty",
        )

    if len(content) > settings.max_letterhead_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Letterhead exceeds {settings.max_letterhead_bytes} bytes",
        )

    # Reject corrupt files now rather than at generation time
    try:
        load_first_page(content)
    except MalformedLetterheadError as e:
        logger.warning(f"Rejected letterhead upload for {account_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=CORRUPT_UPLOAD_MESSAGE,
        )

    account = directory.attach_letterhead(
        account_id,
        Letterhead(name=file.filename or "letterhead.pdf", content=content),
    )
    return AccountResponse.from_domain(account)


@router.delete(
    "/accounts/{account_id}/letterhead",
    response_model=AccountResponse,
    responses={404: {"description": "Account not found"}},
)
async def delete_letterhead(
    account_id: str,
    directory: Annotated[AccountDirectory, Depends(get_directory)],
) -> AccountResponse:
    """Remove the letterhead so orders use the built-in template."""
    return AccountResponse.from_domain(directory.remove_letterhead(account_id))
