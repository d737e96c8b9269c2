"""
Template composer - synthesizes a branded A4 transfer order.

Used when the payer account has no letterhead. The page carries the
organization header, a centred title, the letter body, date and
signature near the bottom and a footer with copyright and page number.
"""

import asyncio
import io
import logging

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from virement.config import get_settings
from virement.domain.models import TransferOrderRequest

from .base import DocumentComposer
from .layout import (
    SMALL_LINE_HEIGHT,
    BlockLayout,
    Cursor,
    LetterContent,
    Pen,
    cm,
    draw_content_block,
    draw_right_block,
)

logger = logging.getLogger(__name__)


MARGIN = 50
LABEL_INDENT = 20
VALUE_INDENT = 150

DATE_Y = 180
SIGNATURE_Y = 120
SIGNATURE_LINE_WIDTH = 220
SMALL_FONT_SIZE = 10
FOOTER_FONT_SIZE = 8
FOOTER_RULE_Y = MARGIN + 20

PRIMARY = HexColor("#0D3373")
SECONDARY = HexColor("#4D4D4D")
RULE = HexColor("#D9D9D9")

# Lightning bolt icon, 24x24 grid with y pointing down
ICON_PATH = [(13, 10), (13, 3), (4, 14), (11, 14), (11, 21), (20, 10)]
ICON_SCALE = 1.5


class TemplateComposer(DocumentComposer):
    """
    Draws a complete transfer order on a blank A4 page.

    Selected when the payer account has no letterhead.
    """

    name = "template"

    def __init__(self, organization_name: str | None = None, copyright_year: int | None = None, **kwargs) -> None:
        """
        Initialize template composer.

        Args:
            organization_name: Name in the header and footer. Uses config if None.
            copyright_year: Footer year. Uses config if None.
            **kwargs: Passed to DocumentComposer
        """
        super().__init__(**kwargs)
        settings = get_settings()
        self.organization_name = organization_name or settings.organization_name
        self.copyright_year = copyright_year or settings.copyright_year

    async def render(self, request: TransferOrderRequest, content: LetterContent) -> bytes:
        buffer = io.BytesIO()
        canvas = Canvas(buffer, pagesize=A4)
        canvas.setTitle("Ordre de virement bancaire")
        canvas.setAuthor(self.organization_name)
        pen = Pen(canvas, self.metrics)
        width, height = A4

        title_y = self._draw_header(pen, width, height)
        await asyncio.sleep(0)

        layout = BlockLayout(
            left=MARGIN,
            label_x=MARGIN + LABEL_INDENT,
            value_x=MARGIN + VALUE_INDENT,
            right=width - MARGIN,
            floor=DATE_Y + SMALL_FONT_SIZE + 8,
            font_size=self.font_size,
            value_bold=True,
        )
        draw_content_block(pen, content, layout, Cursor(title_y - 70))
        await asyncio.sleep(0)

        self._draw_signature(pen, content, width)
        self._draw_footer(pen, width)

        canvas.showPage()
        canvas.save()
        await asyncio.sleep(0)

        return buffer.getvalue()

    def _draw_header(self, pen: Pen, width: float, height: float) -> float:
        """Draw icon, organization name, divider and title. Returns the title baseline."""
        canvas = pen.canvas
        top = height - MARGIN - 5

        path = canvas.beginPath()
        first_x, first_y = ICON_PATH[0]
        path.moveTo(MARGIN + first_x * ICON_SCALE, top - first_y * ICON_SCALE)
        for x, y in ICON_PATH[1:]:
            path.lineTo(MARGIN + x * ICON_SCALE, top - y * ICON_SCALE)
        path.close()
        canvas.setFillColor(PRIMARY)
        canvas.drawPath(path, stroke=0, fill=1)

        pen.text(MARGIN + 40, height - MARGIN, self.organization_name, 20, bold=True, color=PRIMARY)
        pen.rule(MARGIN, width - MARGIN, height - MARGIN - 40, color=RULE)

        title_y = height - MARGIN - 90
        pen.centred_text(width / 2, title_y, "ORDRE DE VIREMENT BANCAIRE", 18, bold=True, color=SECONDARY)
        return title_y

    def _draw_signature(self, pen: Pen, content: LetterContent, width: float) -> None:
        right = width - cm(1)
        max_width = right - MARGIN

        draw_right_block(
            pen,
            right,
            Cursor(DATE_Y, SMALL_LINE_HEIGHT),
            [content.date_line, content.bank_address],
            max_width,
            SMALL_FONT_SIZE,
            floor=SIGNATURE_Y + SMALL_LINE_HEIGHT,
            color=SECONDARY,
        )

        pen.right_text(right, SIGNATURE_Y, content.signature_label, SMALL_FONT_SIZE, color=SECONDARY)
        pen.rule(right - SIGNATURE_LINE_WIDTH, right, SIGNATURE_Y - 10, color=SECONDARY)
        draw_right_block(
            pen,
            right,
            Cursor(SIGNATURE_Y - 25, SMALL_LINE_HEIGHT),
            [content.signatory],
            max_width,
            SMALL_FONT_SIZE,
            floor=FOOTER_RULE_Y + 10,
            bold=True,
            color=SECONDARY,
        )

    def _draw_footer(self, pen: Pen, width: float) -> None:
        pen.rule(MARGIN, width - MARGIN, FOOTER_RULE_Y, thickness=0.5, color=RULE)
        pen.text(
            MARGIN,
            MARGIN,
            f"{self.organization_name}. Tous droits réservés © {self.copyright_year}.",
            FOOTER_FONT_SIZE,
            color=SECONDARY,
        )
        pen.text(width - MARGIN - 50, MARGIN, "Page 1 sur 1", FOOTER_FONT_SIZE, color=SECONDARY)
