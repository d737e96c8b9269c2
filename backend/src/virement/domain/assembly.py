"""
Order assembly - turns raw form input into a TransferOrderRequest.

Checks run in a fixed order and stop at the first failure:
1. A payer account is selected
2. A beneficiary is selected
3. The amount is present, parses to a decimal and, rounded to the cent,
   is strictly positive and small enough to spell out
4. The purpose is not blank

RIB format is not checked here: BankAccount and Beneficiary refuse bad
RIBs when they are created.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from .errors import ValidationError
from .models import BankAccount, Beneficiary, Currency, TransferOrderRequest
from .numerals import CENT, SPELLABLE_LIMIT


@dataclass(frozen=True)
class OrderForm:
    """Raw values as submitted by the form, records already looked up."""
    payer: BankAccount | None
    beneficiary: Beneficiary | None
    amount: str | None
    purpose: str | None
    express: bool = False
    currency: Currency = Currency.MAD


def parse_amount(raw: str | None) -> Decimal:
    """
    Parse a user-typed amount.

    Accepts "1234.56" and the French "1234,56" as well as spaces used as
    thousands separators ("1 234,56"). The result is rounded half-up to the
    cent, which is what the letter prints.

    Raises:
        ValidationError: If the amount is missing or unparseable, rounds to
            zero or less, or is too large to spell out
    """
    text = (raw or "").strip().replace("\u00a0", "").replace(" ", "").replace(",", ".")
    if not text:
        raise ValidationError("amount", "Veuillez saisir un montant.")

    try:
        value = Decimal(text)
    except InvalidOperation:
        raise ValidationError("amount", f"Montant invalide : {raw}")

    if not value.is_finite():
        raise ValidationError("amount", f"Montant invalide : {raw}")

    try:
        value = value.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError("amount", "Le montant est trop élevé.")

    if value <= 0:
        raise ValidationError("amount", "Le montant doit être strictement positif.")
    if value >= SPELLABLE_LIMIT:
        raise ValidationError("amount", "Le montant est trop élevé.")

    return value


class OrderAssembler:
    """
    Validates an OrderForm and builds the immutable request.

    Example:
        request = OrderAssembler().assemble(OrderForm(
            payer=account,
            beneficiary=supplier,
            amount="1500,00",
            purpose="Facture 2024-118",
        ))
    """

    def assemble(self, form: OrderForm) -> TransferOrderRequest:
        """
        Validate ``form`` and return a TransferOrderRequest.

        Raises:
            ValidationError: For the first rule the form breaks
        """
        if form.payer is None:
            raise ValidationError("payer", "Veuillez choisir un compte donneur d'ordre.")

        if form.beneficiary is None:
            raise ValidationError("beneficiary", "Veuillez choisir un bénéficiaire.")

        amount = parse_amount(form.amount)

        purpose = (form.purpose or "").strip()
        if not purpose:
            raise ValidationError("purpose", "Veuillez indiquer le motif du virement.")

        return TransferOrderRequest(
            payer=form.payer,
            beneficiary=form.beneficiary,
            amount=amount,
            purpose=purpose,
            currency=form.currency,
            express=form.express,
        )
