"""Relay eligibility filter (core domain)."""

from __future__ import annotations

import re
from typing import Optional

from core.models import FormattedText


def compile_ignore_pattern(raw_pattern: Optional[str]) -> Optional[re.Pattern]:
    """Compile the configured ignore pattern once, at configuration time.

    Empty or missing patterns mean "allow all". re.error propagates so the
    settings layer can report it as a configuration problem.
    """

    if not raw_pattern:
        return None
    return re.compile(raw_pattern)


def should_forward(text: Optional[FormattedText], ignore_pattern: Optional[re.Pattern]) -> bool:
    """Return True when a source message is eligible for relay.

    Matching logic:
    - No text at all means there is nothing to evaluate, so no relay.
    - Without an ignore pattern every message with text is relayed.
    - Otherwise the message is relayed only if the pattern is not found
      anywhere in the plain text. Entities are not considered.
    """

    if text is None:
        return False

    if ignore_pattern is None:
        return True

    return ignore_pattern.search(text.text) is None
