"""Comment correlation for the target channel's discussion group.

Telegram mirrors every channel post into the linked discussion group as a
message sent by the channel itself. That mirrored copy is the one we answer
with a comment. Human replies in the thread and our own comment, which comes
back through the same update stream, must be ignored. No table of message ids
is kept: the decision uses only the sender identity and the message text.
"""

from __future__ import annotations

from core.config import RelayConfig
from core.formatted_text import extract_text, texts_equal
from core.models import ChannelMessage, ChatSender, UserSender


def should_comment(message: ChannelMessage, config: RelayConfig) -> bool:
    """Return True when ``message`` is the target channel's mirrored post.

    Checks run in a fixed order and stop at the first decision:
    1) no comment template configured -> False
    2) text equals the template (our own comment echoed back) -> False
    3) sent by a user account -> False
    4) sent by a chat -> True only if that chat is the target channel
    5) anything else -> False
    """

    template = config.comment_template
    if template is None:
        return False

    # Without this check the bot would comment on its own comment forever.
    if texts_equal(extract_text(message.content), template):
        return False

    sender = message.sender
    if isinstance(sender, UserSender):
        return False
    if isinstance(sender, ChatSender):
        return sender.chat_id == config.target_chat_id
    return False
