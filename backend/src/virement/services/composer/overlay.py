"""
Overlay composer - prints the order onto the payer's own letterhead.

The first page of the uploaded PDF is used as background. The letter is
drawn on a transparent reportlab page of the same size and merged on top
with pypdf; other pages of the letterhead are ignored.

Layout (1 cm = 28.3465 pt):
- Date line and bank address right-aligned 1 cm from the right edge,
  5 cm below the top
- Letter body from a 5.5 cm left margin, starting 80 pt under the date
- Signature block 7 cm above the bottom edge
"""

import asyncio
import io
import logging

from pypdf import PageObject, PdfReader, PdfWriter
from reportlab.pdfgen.canvas import Canvas

from virement.domain.errors import CompositionError, MalformedLetterheadError
from virement.domain.models import TransferOrderRequest

from .base import DocumentComposer
from .layout import (
    LINE_HEIGHT,
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


LEFT_MARGIN_CM = 5.5
RIGHT_MARGIN_CM = 1.0
DATE_FROM_TOP_CM = 5.0
SIGNATURE_FROM_BOTTOM_CM = 7.0

LABEL_INDENT = 20
VALUE_INDENT = 140
BODY_GAP = 80
SIGNATURE_LINE_WIDTH = 200

# How far ahead of the data pypdf-readable files may carry their header
PDF_HEADER_WINDOW = 1024


def load_first_page(data: bytes) -> PageObject:
    """
    Parse letterhead bytes and return their first page.

    Raises:
        MalformedLetterheadError: If the bytes are empty, carry no PDF
            header, cannot be parsed or hold no page
    """
    if not data:
        raise MalformedLetterheadError("Letterhead file is empty")

    if b"%PDF-" not in data[:PDF_HEADER_WINDOW]:
        raise MalformedLetterheadError("No PDF header found in letterhead file")

    try:
        reader = PdfReader(io.BytesIO(data))
        pages = reader.pages
        if len(pages) == 0:
            raise MalformedLetterheadError("Letterhead PDF has no pages")
        page = pages[0]
        # Force the page box to resolve while errors are still parse errors
        float(page.mediabox.width)
    except MalformedLetterheadError:
        raise
    except Exception as e:
        raise MalformedLetterheadError(f"Letterhead PDF could not be parsed: {e}") from e

    return page


class OverlayComposer(DocumentComposer):
    """
    Draws the transfer order over the first page of a letterhead PDF.

    Selected when the payer account carries a letterhead.
    """

    name = "overlay"

    async def render(self, request: TransferOrderRequest, content: LetterContent) -> bytes:
        letterhead = request.payer.letterhead
        if letterhead is None:
            raise CompositionError("Overlay composer requires a letterhead", {"account": request.payer.id})

        # Step 1: parse the background
        page = load_first_page(letterhead.content)
        box = page.mediabox
        width = float(box.width)
        height = float(box.height)
        logger.info(f"Letterhead '{letterhead.name}' first page: {width:.1f} x {height:.1f} pt")
        await asyncio.sleep(0)

        # Step 2: draw the letter on a transparent page of the same size
        overlay = self.draw_overlay(content, width, height)
        await asyncio.sleep(0)

        # Step 3: merge and serialize
        overlay_page = PdfReader(io.BytesIO(overlay)).pages[0]
        page.merge_translated_page(overlay_page, float(box.left), float(box.bottom))

        writer = PdfWriter()
        writer.add_page(page)
        buffer = io.BytesIO()
        writer.write(buffer)
        await asyncio.sleep(0)

        return buffer.getvalue()

    def draw_overlay(self, content: LetterContent, width: float, height: float) -> bytes:
        """Render the letter alone on a ``width`` x ``height`` page."""
        buffer = io.BytesIO()
        canvas = Canvas(buffer, pagesize=(width, height))
        pen = Pen(canvas, self.metrics)
        size = self.font_size

        left = cm(LEFT_MARGIN_CM)
        right = width - cm(RIGHT_MARGIN_CM)
        signature_y = cm(SIGNATURE_FROM_BOTTOM_CM)

        # Date and bank address, kept above the letter body
        date_y = height - cm(DATE_FROM_TOP_CM)
        body_y = date_y - BODY_GAP
        draw_right_block(
            pen,
            right,
            Cursor(date_y, SMALL_LINE_HEIGHT),
            [content.date_line, content.bank_address],
            right - left,
            size,
            floor=body_y + SMALL_LINE_HEIGHT,
        )

        # Letter body, kept above the signature label
        layout = BlockLayout(
            left=left,
            label_x=left + LABEL_INDENT,
            value_x=left + VALUE_INDENT,
            right=right,
            floor=signature_y + 10 + LINE_HEIGHT,
            font_size=size,
        )
        draw_content_block(pen, content, layout, Cursor(body_y))

        # Signature block
        pen.right_text(right, signature_y + 10, content.signature_label, size)
        pen.rule(right - SIGNATURE_LINE_WIDTH, right, signature_y)
        draw_right_block(
            pen,
            right,
            Cursor(signature_y - 15, SMALL_LINE_HEIGHT),
            [content.signatory],
            right - left,
            size + 1,
            floor=cm(RIGHT_MARGIN_CM),
            bold=True,
        )

        canvas.showPage()
        canvas.save()
        return buffer.getvalue()
