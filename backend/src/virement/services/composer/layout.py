"""
Letter content and the drawing primitives shared by both composers.

Positions are PDF points measured from the bottom-left corner. The
vertical position of the next line is carried by an immutable Cursor that
every drawing helper returns, so the layout of a block reads as a chain of
``cursor = ...`` steps with no hidden state.

Design Decisions:
- Letter text is built once (LetterContent) and rendered by either composer
- Fonts are the Helvetica / Helvetica-Bold pair built into every PDF reader
- Width measurement goes through FontMetrics so wrapping stays font-agnostic
- Free-text values are wrapped to their column; content that would run
  below the block floor aborts the composition instead of overflowing
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from reportlab.lib.colors import Color, HexColor
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from virement.domain.errors import CompositionError
from virement.domain.models import TransferOrderRequest, is_valid_rib
from virement.domain.numerals import amount_to_words
from virement.domain.wrapping import Measure, wrap_text

logger = logging.getLogger(__name__)


# 1 cm in PDF points
CM_TO_POINTS = 28.3465

LINE_HEIGHT = 18
# Right-aligned date, address and signatory lines
SMALL_LINE_HEIGHT = 15
REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"
BLACK = HexColor("#000000")


def cm(value: float) -> float:
    """Convert centimetres to PDF points."""
    return value * CM_TO_POINTS


class FontMetrics:
    """
    Width measurement for the regular/bold typeface pair.

    ``measure(text, size)`` is the only capability the wrapper needs;
    ``measurer`` binds size and weight into a one-argument callable.
    """

    def __init__(self, regular: str = REGULAR_FONT, bold: str = BOLD_FONT) -> None:
        self.regular = regular
        self.bold = bold

    def font_name(self, bold: bool = False) -> str:
        return self.bold if bold else self.regular

    def measure(self, text: str, size: float, bold: bool = False) -> float:
        """Rendered width of ``text`` in points."""
        return pdfmetrics.stringWidth(text, self.font_name(bold), size)

    def measurer(self, size: float, bold: bool = False) -> Measure:
        return lambda text: self.measure(text, size, bold)


@dataclass(frozen=True)
class Cursor:
    """Baseline of the next line to draw."""
    y: float
    line_height: float = LINE_HEIGHT

    def advance(self, lines: float = 1.0) -> "Cursor":
        """Move down by ``lines`` line heights."""
        return replace(self, y=self.y - lines * self.line_height)


@dataclass(frozen=True)
class LetterContent:
    """
    Every string printed on a transfer order.

    Built from a validated request; both composers print the same text.
    """
    subject: str
    salutation: str
    body: tuple[str, ...]
    holder: str
    rib: str
    amount_figures: str
    amount_words: str
    purpose: str
    date_line: str
    bank_address: str
    signature_label: str
    signatory: str


def format_figures(amount: Decimal, currency_code: str) -> str:
    """Amount with two decimals followed by the currency code."""
    value = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{value} {currency_code}"


def build_letter_content(
    request: TransferOrderRequest,
    issued_on: date,
    city: str,
) -> LetterContent:
    """
    Fill the letter templates from a request.

    Raises:
        CompositionError: If a RIB reaching this point is malformed
    """
    for owner, rib in (("payer", request.payer.rib), ("beneficiary", request.beneficiary.rib)):
        if not is_valid_rib(rib):
            raise CompositionError(
                "Malformed RIB reached the composer",
                {"owner": owner, "rib": rib},
            )

    payer = request.payer
    currency = request.currency

    return LetterContent(
        subject=f"Objet : {request.transfer_type}",
        salutation="Madame, Monsieur,",
        body=(
            f"Par le débit de notre compte N° {payer.rib}, ouvert à vos livres",
            f"d'{payer.bank_address}, nous vous demandons",
            "d'effectuer un virement en faveur de :",
        ),
        holder=request.beneficiary.name,
        rib=request.beneficiary.rib,
        amount_figures=format_figures(request.amount, currency.code),
        amount_words=amount_to_words(request.amount, currency.main_unit, currency.sub_unit) + ".",
        purpose=request.purpose,
        date_line=f"Fait à {city}, le {issued_on.strftime('%d/%m/%Y')}",
        bank_address=payer.bank_address,
        signature_label="Cachet et Signature",
        signatory=payer.signatory_name,
    )


@dataclass(frozen=True)
class BlockLayout:
    """
    Columns of the letter body.

    Attributes:
        left: X of the paragraph lines
        label_x: X of the labels in label/value rows
        value_x: X of the values in label/value rows
        right: X that no text may cross
        floor: Lowest baseline the block may use
        font_size: Body font size
        value_bold: Whether values use the bold face
    """
    left: float
    label_x: float
    value_x: float
    right: float
    floor: float
    font_size: float
    value_bold: bool = False

    @property
    def value_width(self) -> float:
        return self.right - self.value_x

    @property
    def text_width(self) -> float:
        return self.right - self.left


class Pen:
    """
    Thin drawing layer over a reportlab canvas.

    Every method that writes at the cursor returns the cursor for the
    next line.
    """

    def __init__(self, canvas: Canvas, metrics: FontMetrics, color: Color = BLACK) -> None:
        self.canvas = canvas
        self.metrics = metrics
        self.color = color

    def _set_font(self, size: float, bold: bool, color: Color | None) -> None:
        self.canvas.setFont(self.metrics.font_name(bold), size)
        self.canvas.setFillColor(color or self.color)

    def text(
        self,
        x: float,
        y: float,
        text: str,
        size: float,
        bold: bool = False,
        color: Color | None = None,
    ) -> None:
        self._set_font(size, bold, color)
        self.canvas.drawString(x, y, text)

    def right_text(
        self,
        right: float,
        y: float,
        text: str,
        size: float,
        bold: bool = False,
        color: Color | None = None,
    ) -> None:
        """Draw ``text`` so that it ends at ``right``."""
        self._set_font(size, bold, color)
        self.canvas.drawRightString(right, y, text)

    def centred_text(
        self,
        centre: float,
        y: float,
        text: str,
        size: float,
        bold: bool = False,
        color: Color | None = None,
    ) -> None:
        self._set_font(size, bold, color)
        self.canvas.drawCentredString(centre, y, text)

    def rule(
        self,
        x1: float,
        x2: float,
        y: float,
        thickness: float = 1.0,
        color: Color | None = None,
    ) -> None:
        """Horizontal line from x1 to x2."""
        self.canvas.setStrokeColor(color or self.color)
        self.canvas.setLineWidth(thickness)
        self.canvas.line(x1, y, x2, y)

    def wrapped(
        self,
        x: float,
        cursor: Cursor,
        text: str,
        max_width: float,
        size: float,
        bold: bool = False,
    ) -> Cursor:
        """
        Draw ``text`` wrapped to ``max_width``, one cursor step per line.

        Returns the cursor positioned under the last line.
        """
        lines = wrap_text(text, self.metrics.measurer(size, bold), max_width) or [""]
        for line in lines:
            self.text(x, cursor.y, line, size, bold)
            cursor = cursor.advance()
        return cursor

    def right_wrapped(
        self,
        right: float,
        cursor: Cursor,
        text: str,
        max_width: float,
        size: float,
        bold: bool = False,
        color: Color | None = None,
    ) -> Cursor:
        """Like :meth:`wrapped`, but every line ends at ``right``."""
        lines = wrap_text(text, self.metrics.measurer(size, bold), max_width) or [""]
        for line in lines:
            self.right_text(right, cursor.y, line, size, bold, color)
            cursor = cursor.advance()
        return cursor

    def labelled(
        self,
        layout: BlockLayout,
        cursor: Cursor,
        label: str,
        value: str,
    ) -> Cursor:
        """Label in the label column, wrapped value in the value column."""
        self.text(layout.label_x, cursor.y, label, layout.font_size)
        return self.wrapped(
            layout.value_x,
            cursor,
            value,
            layout.value_width,
            layout.font_size,
            bold=layout.value_bold,
        )


def check_floor(cursor: Cursor, floor: float, message: str) -> Cursor:
    """Raise CompositionError(message) if the last line drawn sits below ``floor``."""
    # The cursor sits one line below the last baseline drawn
    last_baseline = cursor.y + cursor.line_height
    if last_baseline < floor:
        raise CompositionError(
            message,
            {"last_baseline": round(last_baseline, 2), "floor": floor},
        )
    return cursor


def draw_right_block(
    pen: Pen,
    right: float,
    cursor: Cursor,
    lines: list[str],
    max_width: float,
    size: float,
    floor: float,
    bold: bool = False,
    color: Color | None = None,
) -> Cursor:
    """
    Draw right-aligned paragraphs (date and address, or the signatory).

    Each paragraph is wrapped to ``max_width`` so that no line starts left
    of ``right - max_width``.

    Raises:
        CompositionError: If the last line runs below ``floor``
    """
    for text in lines:
        cursor = pen.right_wrapped(right, cursor, text, max_width, size, bold=bold, color=color)
    return check_floor(cursor, floor, "Date and signature lines do not fit on a single page")


def draw_content_block(
    pen: Pen,
    content: LetterContent,
    layout: BlockLayout,
    cursor: Cursor,
) -> Cursor:
    """
    Draw subject, salutation, body and the label/value rows.

    Identical for both composers; only ``layout`` and the starting cursor
    differ.

    Returns:
        Cursor under the "Motif" row.

    Raises:
        CompositionError: If the block runs below ``layout.floor``
    """
    size = layout.font_size

    cursor = pen.wrapped(layout.left, cursor, content.subject, layout.text_width, size + 1, bold=True)
    cursor = cursor.advance(1.5)

    cursor = pen.wrapped(layout.left, cursor, content.salutation, layout.text_width, size)
    cursor = cursor.advance()

    for line in content.body:
        cursor = pen.wrapped(layout.left, cursor, line, layout.text_width, size)
    cursor = cursor.advance()

    cursor = pen.labelled(layout, cursor, "Titulaire :", content.holder)
    cursor = pen.labelled(layout, cursor, "RIB :", content.rib)
    cursor = cursor.advance()

    cursor = pen.labelled(layout, cursor, "Montant en chiffres :", content.amount_figures)
    cursor = pen.labelled(layout, cursor, "Montant en lettres :", content.amount_words)
    cursor = cursor.advance()

    cursor = pen.labelled(layout, cursor, "Motif :", content.purpose)

    logger.debug(f"Content block ends at y={cursor.y:.1f}")
    return check_floor(cursor, layout.floor, "Letter content does not fit on a single page")
