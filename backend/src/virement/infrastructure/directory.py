"""
In-memory directory of payer accounts and suppliers.

Stands in for the account and supplier management screens: records live
for the lifetime of the process and nothing is persisted. RIB format is
enforced by the domain records themselves, so every record held here is
well-formed.
"""

import logging
from dataclasses import replace

from virement.domain.errors import UnknownRecordError
from virement.domain.models import BankAccount, Beneficiary, Letterhead

logger = logging.getLogger(__name__)


DEFAULT_BANK_ADDRESS = "Attijariwafa Bank, 22 Rue de la Paix, 75002 Paris"

DEFAULT_ACCOUNTS = [
    BankAccount("acc1", "AKOR FOODS", "007787000215400030054744", DEFAULT_BANK_ADDRESS, "Le Gérant"),
    BankAccount("acc2", "MGM FOOD", "007787000215400030054755", DEFAULT_BANK_ADDRESS, "Le Gérant"),
    BankAccount("acc3", "DREAM DONUTS & COFFEE", "007787000215400030054766", DEFAULT_BANK_ADDRESS, "Le Gérant"),
    BankAccount("acc4", "RASMAL GESTION", "007787000215400030054777", DEFAULT_BANK_ADDRESS, "Le Gérant"),
    BankAccount("acc5", "SHOPAL", "007787000215400030054788", DEFAULT_BANK_ADDRESS, "Le Gérant"),
    BankAccount("acc6", "CHICCORNER", "007787000215400030054799", DEFAULT_BANK_ADDRESS, "Le Gérant"),
]

DEFAULT_SUPPLIERS = [
    Beneficiary("5", "Fournisseur Alpha", "164787000215400030051234"),
    Beneficiary("6", "Services Beta SARL", "164787000215400030054321"),
    Beneficiary("7", "Logistique Gamma", "164787000215400030055678"),
]


class AccountDirectory:
    """
    Lookup of payer accounts and beneficiaries by id.

    Example:
        directory = AccountDirectory.with_defaults()
        payer = directory.get_account("acc1")
        supplier = directory.get_beneficiary("6")
    """

    def __init__(
        self,
        accounts: list[BankAccount] | None = None,
        suppliers: list[Beneficiary] | None = None,
    ) -> None:
        self._accounts: dict[str, BankAccount] = {a.id: a for a in accounts or []}
        self._suppliers: dict[str, Beneficiary] = {s.id: s for s in suppliers or []}

    @classmethod
    def with_defaults(cls) -> "AccountDirectory":
        """Directory seeded with the built-in accounts and suppliers."""
        return cls(accounts=list(DEFAULT_ACCOUNTS), suppliers=list(DEFAULT_SUPPLIERS))

    @property
    def account_count(self) -> int:
        return len(self._accounts)

    @property
    def supplier_count(self) -> int:
        return len(self._suppliers)

    def add_account(self, account: BankAccount) -> BankAccount:
        self._accounts[account.id] = account
        return account

    def add_beneficiary(self, beneficiary: Beneficiary) -> Beneficiary:
        self._suppliers[beneficiary.id] = beneficiary
        return beneficiary

    def get_account(self, account_id: str) -> BankAccount:
        """
        Raises:
            UnknownRecordError: If no account has this id
        """
        try:
            return self._accounts[account_id]
        except KeyError:
            raise UnknownRecordError("account", account_id) from None

    def get_beneficiary(self, beneficiary_id: str) -> Beneficiary:
        """
        Raises:
            UnknownRecordError: If no supplier has this id
        """
        try:
            return self._suppliers[beneficiary_id]
        except KeyError:
            raise UnknownRecordError("supplier", beneficiary_id) from None

    def find_account(self, account_id: str | None) -> BankAccount | None:
        """Account for a form selection; None when nothing is selected."""
        if not account_id:
            return None
        return self.get_account(account_id)

    def find_beneficiary(self, beneficiary_id: str | None) -> Beneficiary | None:
        """Beneficiary for a form selection; None when nothing is selected."""
        if not beneficiary_id:
            return None
        return self.get_beneficiary(beneficiary_id)

    def list_accounts(self) -> list[BankAccount]:
        """Accounts sorted by company name, as the payer picker shows them."""
        return sorted(self._accounts.values(), key=lambda a: a.company_name.casefold())

    def search_beneficiaries(self, query: str | None = None) -> list[Beneficiary]:
        """Suppliers whose name contains ``query`` (case-insensitive)."""
        suppliers = sorted(self._suppliers.values(), key=lambda s: s.name.casefold())
        if not query:
            return suppliers
        needle = query.casefold()
        return [s for s in suppliers if needle in s.name.casefold()]

    def attach_letterhead(self, account_id: str, letterhead: Letterhead) -> BankAccount:
        """Replace the account's letterhead; returns the updated account."""
        account = replace(self.get_account(account_id), letterhead=letterhead)
        self._accounts[account_id] = account
        logger.info(f"Letterhead '{letterhead.name}' attached to account {account_id}")
        return account

    def remove_letterhead(self, account_id: str) -> BankAccount:
        """Drop the account's letterhead so orders use the built-in template."""
        account = replace(self.get_account(account_id), letterhead=None)
        self._accounts[account_id] = account
        logger.info(f"Letterhead removed from account {account_id}")
        return account
