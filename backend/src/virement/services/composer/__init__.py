"""
Composer subpackage - PDF rendering strategies for transfer orders.

``select_composer`` picks the strategy once per request: the overlay
composer when the payer has a letterhead, the template composer otherwise.
"""

from virement.domain.models import TransferOrderRequest

from .base import DocumentComposer
from .layout import CM_TO_POINTS, Cursor, FontMetrics, LetterContent, build_letter_content
from .overlay import OverlayComposer
from .template import TemplateComposer


def select_composer(request: TransferOrderRequest, **kwargs) -> DocumentComposer:
    """Return the composer matching the payer's letterhead setup."""
    if request.uses_letterhead:
        return OverlayComposer(**kwargs)
    return TemplateComposer(**kwargs)


__all__ = [
    "CM_TO_POINTS",
    "Cursor",
    "DocumentComposer",
    "FontMetrics",
    "LetterContent",
    "OverlayComposer",
    "TemplateComposer",
    "build_letter_content",
    "select_composer",
]
