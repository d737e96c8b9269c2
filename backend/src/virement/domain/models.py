"""
Domain models for bank transfer orders.

These models represent the records a transfer order is built from: the
payer's bank account, the beneficiary, and the validated request handed
to a document composer.

Design Decisions:
- Using frozen dataclasses for immutable, typed domain objects
- RIB format is enforced at construction so no entry point can hold a bad one
- Decimal for all monetary values to avoid floating-point errors
- Letterhead bytes travel with the account; composers only read them
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .errors import InvalidRibError


RIB_LENGTH = 24

_RIB_PATTERN = re.compile(r"[0-9]{24}")


def is_valid_rib(rib: str) -> bool:
    """Return True if ``rib`` is exactly 24 ASCII digits."""
    return isinstance(rib, str) and _RIB_PATTERN.fullmatch(rib) is not None


def ensure_rib(rib: str) -> str:
    """Return ``rib`` unchanged or raise InvalidRibError."""
    if not is_valid_rib(rib):
        raise InvalidRibError(rib)
    return rib


class Currency(Enum):
    """Transfer currencies with the nouns used to spell amounts out."""
    MAD = ("MAD", "dirham", "centime")

    def __init__(self, code: str, main_unit: str, sub_unit: str) -> None:
        self.code = code
        self.main_unit = main_unit
        self.sub_unit = sub_unit

    @classmethod
    def from_code(cls, code: str) -> "Currency":
        """Look a currency up by its ISO code (case-insensitive)."""
        for member in cls:
            if member.code == code.upper():
                return member
        raise ValueError(f"Unsupported currency: {code}")


@dataclass(frozen=True)
class Letterhead:
    """
    Pre-printed stationery uploaded by the user.

    Only the first page of ``content`` is used as the letter background.
    """
    name: str
    content: bytes = field(repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class BankAccount:
    """
    A payer account ("donneur d'ordre").

    Owned by the account directory; read-only to the composers.
    """
    id: str
    company_name: str
    rib: str
    bank_address: str
    signatory_name: str
    letterhead: Letterhead | None = None

    def __post_init__(self) -> None:
        """Validate RIB format."""
        ensure_rib(self.rib)


@dataclass(frozen=True)
class Beneficiary:
    """A supplier that receives the transfer."""
    id: str
    name: str
    rib: str

    def __post_init__(self) -> None:
        """Validate RIB format."""
        ensure_rib(self.rib)


@dataclass(frozen=True)
class TransferOrderRequest:
    """
    A validated transfer order, ready for composition.

    Built once per generation attempt by the OrderAssembler and discarded
    afterwards. Composers assume every business rule already holds.
    """
    payer: BankAccount
    beneficiary: Beneficiary
    amount: Decimal
    purpose: str
    currency: Currency = Currency.MAD
    express: bool = False

    @property
    def transfer_type(self) -> str:
        """Subject line label, flagged when the transfer is express."""
        return "Virement bancaire EXPRESS" if self.express else "Virement bancaire"

    @property
    def uses_letterhead(self) -> bool:
        return self.payer.letterhead is not None


@dataclass(frozen=True)
class ComposedDocument:
    """PDF bytes produced by a composer plus the suggested download name."""
    content: bytes = field(repr=False)
    filename: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)
