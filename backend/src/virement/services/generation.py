"""
Transfer order generation workflow.

Coordinates the full pipeline for one order:
1. Resolve the selected account and supplier
2. Validate the form into a TransferOrderRequest
3. Pick the composer (letterhead overlay or built-in template)
4. Compose the PDF
5. Export it under the beneficiary's name

This is the primary interface used by the API routes and the CLI.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from virement.domain.assembly import OrderAssembler, OrderForm
from virement.domain.errors import GenerationInProgressError
from virement.domain.models import ComposedDocument, Currency, TransferOrderRequest
from virement.infrastructure.directory import AccountDirectory

from .composer import DocumentComposer, FontMetrics, select_composer
from .exporter import ExportedFile, Exporter

logger = logging.getLogger(__name__)


ComposerFactory = Callable[..., DocumentComposer]


@dataclass(frozen=True)
class GenerationResult:
    """Outcome of a successful generation."""
    request: TransferOrderRequest
    document: ComposedDocument
    exported: ExportedFile
    composer: str


class TransferOrderService:
    """
    Orchestrates validation, composition and export of transfer orders.

    At most one generation runs at a time: ``busy`` is set while a
    composition is in flight and a concurrent request is refused with
    GenerationInProgressError. The flag is cleared whatever the outcome.

    Example:
        service = TransferOrderService(directory=AccountDirectory.with_defaults())

        result = await service.generate(
            payer_account_id="acc1",
            beneficiary_id="6",
            amount="1234.56",
            purpose="Facture F-2024-118",
        )
        result.exported.filename  # 'ordre_virement_Services_Beta_SARL.pdf'
    """

    def __init__(
        self,
        directory: AccountDirectory,
        assembler: OrderAssembler | None = None,
        exporter: Exporter | None = None,
        composer_factory: ComposerFactory = select_composer,
        metrics: FontMetrics | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize generation service.

        Args:
            directory: Source of payer accounts and suppliers
            assembler: Form validator (created if None)
            exporter: Artifact exporter (in-memory Exporter if None)
            composer_factory: Picks a composer for a request
            metrics: Font metrics shared by the composers
            today: Clock for the date line
        """
        self.directory = directory
        self.assembler = assembler or OrderAssembler()
        self.exporter = exporter or Exporter()
        self.composer_factory = composer_factory
        self.metrics = metrics or FontMetrics()
        self.today = today
        self.busy = False

    def build_request(
        self,
        payer_account_id: str | None,
        beneficiary_id: str | None,
        amount: str | None,
        purpose: str | None,
        express: bool = False,
        currency: Currency = Currency.MAD,
    ) -> TransferOrderRequest:
        """
        Resolve ids and validate the form.

        Raises:
            UnknownRecordError: If an id does not match a record
            ValidationError: For the first rule the form breaks
        """
        form = OrderForm(
            payer=self.directory.find_account(payer_account_id),
            beneficiary=self.directory.find_beneficiary(beneficiary_id),
            amount=amount,
            purpose=purpose,
            express=express,
            currency=currency,
        )
        return self.assembler.assemble(form)

    async def generate(
        self,
        payer_account_id: str | None,
        beneficiary_id: str | None,
        amount: str | None,
        purpose: str | None,
        express: bool = False,
        currency: Currency = Currency.MAD,
    ) -> GenerationResult:
        """
        Validate, compose and export one transfer order.

        Raises:
            GenerationInProgressError: If another generation is running
            UnknownRecordError: If an id does not match a record
            ValidationError: If the form is rejected
            MalformedLetterheadError: If the letterhead PDF is corrupt
            CompositionError: For any other composition failure
        """
        if self.busy:
            logger.warning("Generation refused: another order is in flight")
            raise GenerationInProgressError()

        request = self.build_request(
            payer_account_id,
            beneficiary_id,
            amount,
            purpose,
            express=express,
            currency=currency,
        )

        self.busy = True
        try:
            composer = self.composer_factory(request, metrics=self.metrics, today=self.today)
            logger.info(
                f"Generating order {request.payer.id} -> {request.beneficiary.id} "
                f"({request.amount} {request.currency.code}) with {composer.name} composer"
            )
            document = await composer.compose(request)
            exported = self.exporter.export(document.content, request.beneficiary.name)
        finally:
            self.busy = False

        return GenerationResult(
            request=request,
            document=document,
            exported=exported,
            composer=composer.name,
        )
