"""
Pydantic schemas for API request/response validation.

These schemas define the contract between frontend and backend.
Amounts travel as strings so the user's typing reaches the assembler
unchanged and no float rounding creeps in.
"""

from pydantic import BaseModel, Field

from virement.domain.models import BankAccount, Beneficiary


RIB_PATTERN = r"^[0-9]{24}$"


# =============================================================================
# Request Schemas
# =============================================================================

class GenerateOrderRequest(BaseModel):
    """Transfer order form as submitted by the frontend."""
    payer_account_id: str = Field(
        default="",
        description="Id of the payer account (donneur d'ordre)",
    )
    beneficiary_id: str = Field(
        default="",
        description="Id of the supplier receiving the transfer",
    )
    amount: str = Field(
        default="",
        description="Amount as typed, e.g. '1234.56' or '1 234,56'",
    )
    currency: str = Field(
        default="MAD",
        description="ISO currency code",
    )
    purpose: str = Field(
        default="",
        description="Motif du virement",
    )
    express: bool = Field(
        default=False,
        description="Request an express transfer",
    )


# =============================================================================
# Response Schemas
# =============================================================================

class LetterheadResponse(BaseModel):
    """Letterhead metadata (never the bytes)."""
    name: str
    size_bytes: int


class AccountResponse(BaseModel):
    """Payer account as shown in the account picker."""
    id: str
    company_name: str
    rib: str = Field(..., pattern=RIB_PATTERN)
    bank_address: str
    signatory_name: str
    letterhead: LetterheadResponse | None = None

    @classmethod
    def from_domain(cls, account: BankAccount) -> "AccountResponse":
        letterhead = None
        if account.letterhead:
            letterhead = LetterheadResponse(
                name=account.letterhead.name,
                size_bytes=account.letterhead.size_bytes,
            )
        return cls(
            id=account.id,
            company_name=account.company_name,
            rib=account.rib,
            bank_address=account.bank_address,
            signatory_name=account.signatory_name,
            letterhead=letterhead,
        )


class SupplierResponse(BaseModel):
    """Supplier as shown in the beneficiary search."""
    id: str
    name: str
    rib: str = Field(..., pattern=RIB_PATTERN)

    @classmethod
    def from_domain(cls, beneficiary: Beneficiary) -> "SupplierResponse":
        return cls(id=beneficiary.id, name=beneficiary.name, rib=beneficiary.rib)


class AmountWordsResponse(BaseModel):
    """Amount spelled out in French."""
    amount: str
    currency: str
    words: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    accounts: int
    suppliers: int
    generating: bool = False


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str | None = None
    code: str | None = None
    field: str | None = None
