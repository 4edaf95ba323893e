"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Optional

from core.models import FormattedText


@dataclass(frozen=True)
class RelayConfig:
    """Relay settings consumed by the dispatcher, executor, and correlator."""

    source_chat_id: int
    target_chat_id: int
    discussion_chat_id: int = 0
    ignore_pattern: Optional[re.Pattern] = None
    comment_template: Optional[FormattedText] = None
    post_comment_silently: bool = False
    show_forwarded: bool = False

    @property
    def send_as_copy(self) -> bool:
        # A copy hides the "forwarded from" header; a forward keeps it.
        return not self.show_forwarded

    @property
    def comments_enabled(self) -> bool:
        return bool(self.discussion_chat_id) and self.comment_template is not None
