"""
Greedy word wrapping against a measured width.

The wrapper knows nothing about fonts: it receives a ``measure`` callable
returning the rendered width of a string, so it can be exercised with a
fake measurer and driven by reportlab metrics in production.

No hyphenation and no justification: words are never split and a word
wider than ``max_width`` simply gets a line of its own.
"""

from typing import Callable

Measure = Callable[[str], float]


def wrap_text(text: str, measure: Measure, max_width: float) -> list[str]:
    """
    Break ``text`` into lines that fit ``max_width``.

    Args:
        text: Text with words separated by single spaces
        measure: Width of a candidate line, in the same unit as max_width
        max_width: Widest allowed line that holds several words

    Returns:
        Lines in reading order; empty for empty input.
    """
    if not text:
        return []

    words = text.split(" ")
    lines: list[str] = []
    current = words[0]

    for word in words[1:]:
        candidate = f"{current} {word}"
        if measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(current)
            current = word

    lines.append(current)
    return lines
