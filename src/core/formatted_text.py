"""Formatted text helpers (core domain)."""

from __future__ import annotations

from typing import Dict, Optional

from core.models import ContentKind, FormattedText, MessageContent

# Every ContentKind must appear here. True means the content's text (body or
# caption) is visible to the filter and the correlator.
CONTENT_TEXT_VISIBILITY: Dict[ContentKind, bool] = {
    ContentKind.TEXT: True,
    ContentKind.PHOTO: True,
    ContentKind.VIDEO: True,
    ContentKind.DOCUMENT: True,
    ContentKind.OTHER: False,
}


def texts_equal(a: Optional[FormattedText], b: Optional[FormattedText]) -> bool:
    """Structurally compare two formatted texts.

    An absent operand never matches, not even another absent one. Entities are
    compared positionally on (offset, length, type) only.
    """

    if a is None or b is None:
        return False

    if a.kind != b.kind or a.text != b.text or a.extra != b.extra:
        return False

    if len(a.entities) != len(b.entities):
        return False

    for left, right in zip(a.entities, b.entities):
        if (left.offset, left.length, left.type) != (right.offset, right.length, right.type):
            return False

    return True


def extract_text(content: Optional[MessageContent]) -> Optional[FormattedText]:
    """Return the body or caption of a message, or None for other content."""

    if content is None:
        return None
    if not CONTENT_TEXT_VISIBILITY.get(content.kind, False):
        return None
    return content.text
