"""
Composer interface shared by the overlay and template strategies.

A composer turns a validated TransferOrderRequest into PDF bytes. The
public ``compose`` coroutine handles what both strategies have in common
(letter content, logging, error wrapping, naming the result) and
delegates the page work to ``render``.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Callable

from virement.config import get_settings
from virement.domain.errors import CompositionError
from virement.domain.models import ComposedDocument, TransferOrderRequest
from virement.services.exporter import export_filename

from .layout import FontMetrics, LetterContent, build_letter_content

logger = logging.getLogger(__name__)


class DocumentComposer(ABC):
    """
    Abstract transfer-order composer.

    Subclasses implement ``render``; callers only ever use ``compose``.
    """

    name = "composer"

    def __init__(
        self,
        metrics: FontMetrics | None = None,
        font_size: float | None = None,
        city: str | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """
        Initialize composer.

        Args:
            metrics: Width measurement for the typeface pair (Helvetica if None)
            font_size: Body font size. Uses config if None.
            city: City printed on the date line. Uses config if None.
            today: Clock for the date line
        """
        settings = get_settings()
        self.metrics = metrics or FontMetrics()
        self.font_size = font_size or settings.font_size
        self.city = city or settings.city
        self.today = today

    async def compose(self, request: TransferOrderRequest) -> ComposedDocument:
        """
        Produce the transfer order PDF for ``request``.

        Steps run strictly in sequence and yield to the event loop between
        them. Any failure aborts the whole call; nothing partial is returned.

        Raises:
            MalformedLetterheadError: Letterhead bytes are not a readable PDF
            CompositionError: Any other drawing or serialization failure
        """
        logger.info(
            f"Composing transfer order with {self.name} composer "
            f"for beneficiary {request.beneficiary.id}"
        )

        try:
            content = build_letter_content(request, self.today(), self.city)
            await asyncio.sleep(0)
            pdf_bytes = await self.render(request, content)
        except CompositionError:
            logger.exception(f"{self.name} composition failed")
            raise
        except Exception as e:
            logger.exception(f"{self.name} composition failed")
            raise CompositionError(
                f"PDF composition failed: {e}",
                {"composer": self.name},
            ) from e

        if not pdf_bytes:
            raise CompositionError("Composer produced an empty document", {"composer": self.name})

        logger.info(f"Composed {len(pdf_bytes)} bytes with {self.name} composer")
        return ComposedDocument(
            content=pdf_bytes,
            filename=export_filename(request.beneficiary.name),
        )

    @abstractmethod
    async def render(self, request: TransferOrderRequest, content: LetterContent) -> bytes:
        """Draw ``content`` and return the serialized PDF."""
        pass
