"""
Tests for the overlay and template composers.

Generated PDFs are read back with pypdf to check page geometry and text.
"""

import io
from dataclasses import replace

import pytest
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4, letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen.canvas import Canvas

from virement.domain.errors import CompositionError, MalformedLetterheadError
from virement.domain.models import Beneficiary, Letterhead
from virement.services.composer import overlay as overlay_module
from virement.services.composer import template as template_module
from virement.services.composer import (
    CM_TO_POINTS,
    Cursor,
    OverlayComposer,
    TemplateComposer,
    build_letter_content,
    select_composer,
)
from virement.services.composer.layout import cm
from virement.services.composer.overlay import load_first_page

from conftest import ISSUED_ON, make_letterhead_pdf


def read_pdf(content: bytes) -> PdfReader:
    return PdfReader(io.BytesIO(content))


def page_text(content: bytes) -> str:
    return read_pdf(content).pages[0].extract_text()


def with_letterhead(account, content: bytes, name: str = "entete.pdf"):
    return replace(account, letterhead=Letterhead(name=name, content=content))


LONG_ADDRESS = (
    "Banque Marocaine du Commerce Extérieur, Agence Centrale Casablanca Anfa, "
    "140 Avenue Hassan II, 20000 Casablanca, Royaume du Maroc"
)


@pytest.fixture
def drawn(monkeypatch) -> list[tuple[str, float, float]]:
    """(text, left x, right x) of every string the composers draw."""
    extents: list[tuple[str, float, float]] = []

    class RecordingCanvas(Canvas):
        def _width(self, text):
            return pdfmetrics.stringWidth(text, self._fontname, self._fontsize)

        def drawString(self, x, y, text, *args, **kwargs):
            extents.append((text, x, x + self._width(text)))
            return super().drawString(x, y, text, *args, **kwargs)

        def drawRightString(self, x, y, text, *args, **kwargs):
            extents.append((text, x - self._width(text), x))
            return super().drawRightString(x, y, text, *args, **kwargs)

        def drawCentredString(self, x, y, text, *args, **kwargs):
            half = self._width(text) / 2
            extents.append((text, x - half, x + half))
            return super().drawCentredString(x, y, text, *args, **kwargs)

    monkeypatch.setattr(template_module, "Canvas", RecordingCanvas)
    monkeypatch.setattr(overlay_module, "Canvas", RecordingCanvas)
    return extents


def assert_within(extents, left: float, right: float) -> None:
    for text, start, end in extents:
        assert start >= left - 0.01, f"{text!r} starts at {start:.1f}, left of {left:.1f}"
        assert end <= right + 0.01, f"{text!r} ends at {end:.1f}, right of {right:.1f}"


class TestLetterContent:
    """Text shared by both composers."""

    def test_lines(self, make_request):
        content = build_letter_content(make_request(), ISSUED_ON, "Casablanca")

        assert content.subject == "Objet : Virement bancaire"
        assert content.body == (
            "Par le débit de notre compte N° 007787000215400030054744, ouvert à vos livres",
            "d'Attijariwafa Bank, 22 Rue de la Paix, 75002 Paris, nous vous demandons",
            "d'effectuer un virement en faveur de :",
        )
        assert content.holder == "Services Beta SARL"
        assert content.rib == "164787000215400030054321"
        assert content.amount_figures == "1234.56 MAD"
        assert content.amount_words == (
            "Mille deux cent trente-quatre dirhams et cinquante-six centimes."
        )
        assert content.date_line == "Fait à Casablanca, le 14/03/2025"
        assert content.signature_label == "Cachet et Signature"
        assert content.signatory == "Le Gérant"

    def test_express_subject(self, make_request):
        content = build_letter_content(make_request(express=True), ISSUED_ON, "Casablanca")
        assert content.subject == "Objet : Virement bancaire EXPRESS"

    def test_figures_have_two_decimals(self, make_request):
        from decimal import Decimal

        content = build_letter_content(make_request(amount=Decimal("1500")), ISSUED_ON, "Rabat")
        assert content.amount_figures == "1500.00 MAD"
        assert content.date_line.startswith("Fait à Rabat")

    def test_malformed_rib_is_fatal(self, make_request, beneficiary):
        # Bypass construction checks to simulate a corrupted record
        broken = replace(beneficiary)
        object.__setattr__(broken, "rib", "1234")

        with pytest.raises(CompositionError, match="Malformed RIB"):
            build_letter_content(make_request(beneficiary=broken), ISSUED_ON, "Casablanca")


class TestCursor:
    def test_advance_returns_new_cursor(self):
        cursor = Cursor(700)
        moved = cursor.advance(1.5)

        assert cursor.y == 700
        assert moved.y == 700 - 1.5 * 18

    def test_conversion_factor(self):
        assert CM_TO_POINTS == 28.3465


class TestSelectComposer:
    def test_template_without_letterhead(self, make_request, today):
        assert isinstance(select_composer(make_request(), today=today), TemplateComposer)

    def test_overlay_with_letterhead(self, make_request, payer_with_letterhead, today):
        request = make_request(payer=payer_with_letterhead)
        assert isinstance(select_composer(request, today=today), OverlayComposer)


class TestTemplateComposer:
    """Full synthesis on a blank A4 page."""

    async def test_composes_single_a4_page(self, make_request, today):
        document = await TemplateComposer(today=today).compose(make_request())

        reader = read_pdf(document.content)
        assert document.content.startswith(b"%PDF")
        assert len(reader.pages) == 1
        box = reader.pages[0].mediabox
        assert float(box.width) == pytest.approx(A4[0])
        assert float(box.height) == pytest.approx(A4[1])

    async def test_filename(self, make_request, today):
        document = await TemplateComposer(today=today).compose(make_request())
        assert document.filename == "ordre_virement_Services_Beta_SARL.pdf"

    async def test_text_content(self, make_request, today):
        document = await TemplateComposer(today=today).compose(make_request(express=True))
        text = page_text(document.content)

        assert "RASMAL GROUP" in text
        assert "ORDRE DE VIREMENT BANCAIRE" in text
        assert "EXPRESS" in text
        assert "164787000215400030054321" in text
        assert "Services Beta SARL" in text
        assert "1234.56 MAD" in text
        assert "14/03/2025" in text
        assert "Cachet et Signature" in text
        assert "Page 1 sur 1" in text

    async def test_organization_override(self, make_request, today):
        composer = TemplateComposer(organization_name="MGM FOOD", copyright_year=2030, today=today)
        text = page_text((await composer.compose(make_request())).content)

        assert "MGM FOOD" in text
        assert "2030" in text

    async def test_long_amount_wraps_within_page(self, make_request, today):
        from decimal import Decimal

        request = make_request(amount=Decimal("977977977.97"))
        document = await TemplateComposer(today=today).compose(request)

        assert len(read_pdf(document.content).pages) == 1

    async def test_overflowing_content_aborts(self, make_request, today):
        request = make_request(purpose=" ".join(["justificatif"] * 400))

        with pytest.raises(CompositionError, match="does not fit"):
            await TemplateComposer(today=today).compose(request)


class TestOverlayComposer:
    """Letter printed over a letterhead's first page."""

    async def test_composes_over_letterhead(self, make_request, payer_with_letterhead, today):
        request = make_request(payer=payer_with_letterhead)
        document = await OverlayComposer(today=today).compose(request)

        assert document.content
        reader = read_pdf(document.content)
        assert len(reader.pages) == 1

        text = reader.pages[0].extract_text()
        assert "AKOR FOODS SARL" in text  # letterhead background
        assert "164787000215400030054321" in text
        assert "Cachet et Signature" in text
        assert "RASMAL GROUP" not in text

    async def test_keeps_letterhead_page_size(self, make_request, payer, today):
        request = make_request(payer=with_letterhead(payer, make_letterhead_pdf(pagesize=letter)))
        document = await OverlayComposer(today=today).compose(request)

        box = read_pdf(document.content).pages[0].mediabox
        assert float(box.width) == pytest.approx(letter[0])
        assert float(box.height) == pytest.approx(letter[1])

    async def test_uses_first_page_only(self, make_request, payer, today):
        request = make_request(payer=with_letterhead(payer, make_letterhead_pdf(pages=3)))
        document = await OverlayComposer(today=today).compose(request)

        reader = read_pdf(document.content)
        assert len(reader.pages) == 1
        assert "page 1" in reader.pages[0].extract_text()

    @pytest.mark.parametrize(
        "content",
        [
            b"",
            b"garbage bytes, definitely not a PDF",
            b"%PDF-1.7\nthis is not really a pdf\n",
            bytes(range(256)) * 4,
        ],
    )
    async def test_malformed_letterhead(self, make_request, payer, today, content):
        request = make_request(payer=with_letterhead(payer, content))

        with pytest.raises(MalformedLetterheadError):
            await OverlayComposer(today=today).compose(request)

    async def test_malformed_letterhead_is_a_composition_error(self, make_request, payer, today):
        request = make_request(payer=with_letterhead(payer, b"not a pdf"))

        with pytest.raises(CompositionError):
            await OverlayComposer(today=today).compose(request)

    async def test_requires_letterhead(self, make_request, today):
        with pytest.raises(CompositionError, match="requires a letterhead"):
            await OverlayComposer(today=today).compose(make_request())

    def test_load_first_page(self, letterhead_pdf):
        page = load_first_page(letterhead_pdf)
        assert float(page.mediabox.width) == pytest.approx(A4[0])


class TestHorizontalBounds:
    """Every drawn line stays between the page margins."""

    async def test_long_name_wraps(self, make_request, payer_with_letterhead, today, drawn):
        long_name = "Société Industrielle et Commerciale de Distribution Alimentaire du Grand Casablanca"
        beneficiary = Beneficiary(id="9", name=long_name, rib="164787000215400030059999")
        request = make_request(payer=payer_with_letterhead, beneficiary=beneficiary)

        document = await OverlayComposer(today=today).compose(request)

        assert document.filename == f"ordre_virement_{long_name.replace(' ', '_')}.pdf"
        assert long_name not in [text for text, _, _ in drawn]
        assert_within(drawn, cm(5.5), A4[0] - cm(1))

    async def test_template_long_bank_address(self, make_request, payer, today, drawn):
        request = make_request(payer=replace(payer, bank_address=LONG_ADDRESS))

        await TemplateComposer(today=today).compose(request)

        address_lines = [text for text, _, _ in drawn if text and text in LONG_ADDRESS]
        assert len(address_lines) >= 2
        assert " ".join(address_lines[-2:]) in LONG_ADDRESS
        assert_within(drawn, 50, A4[0] - cm(1))

    async def test_overlay_long_bank_address(self, make_request, payer, letterhead_pdf, today, drawn):
        account = with_letterhead(replace(payer, bank_address=LONG_ADDRESS), letterhead_pdf)

        await OverlayComposer(today=today).compose(make_request(payer=account))

        assert LONG_ADDRESS not in [text for text, _, _ in drawn]
        assert_within(drawn, cm(5.5), A4[0] - cm(1))

    async def test_default_order_within_margins(self, make_request, today, drawn):
        await TemplateComposer(today=today).compose(make_request(express=True))

        assert drawn
        assert_within(drawn, 50, A4[0] - cm(1))

    async def test_address_too_long_for_signature_area(self, make_request, payer, today):
        request = make_request(payer=replace(payer, bank_address=" ".join([LONG_ADDRESS] * 3)))

        with pytest.raises(CompositionError, match="do not fit"):
            await TemplateComposer(today=today).compose(request)
