"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any integration-specific types. Content, sender, and update kinds
are closed sets: adapters must map anything they do not recognise onto one of
the variants below.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Tuple, Union


class EntityType(str, Enum):
    """Kind of span annotation over a formatted text."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    SPOILER = "spoiler"
    CODE = "code"
    PRE = "pre"
    TEXT_URL = "text_url"
    URL = "url"
    MENTION = "mention"
    MENTION_NAME = "mention_name"
    HASHTAG = "hashtag"
    CASHTAG = "cashtag"
    BOT_COMMAND = "bot_command"
    EMAIL = "email"
    PHONE = "phone"
    BLOCKQUOTE = "blockquote"
    CUSTOM_EMOJI = "custom_emoji"
    BANK_CARD = "bank_card"
    UNKNOWN = "unknown"


class TextKind(str, Enum):
    """PLAIN: a bare string. PARSED: markup already resolved into entities.

    Texts received from Telegram and the rendered comment template are both
    PARSED, so they compare equal when their content matches.
    """

    PLAIN = "plain"
    PARSED = "parsed"


class ContentKind(str, Enum):
    TEXT = "text"
    PHOTO = "photo"
    VIDEO = "video"
    DOCUMENT = "document"
    OTHER = "other"


@dataclass(frozen=True)
class TextEntity:
    """A single span annotation (bold, link, ...) over FormattedText.text.

    ``raw`` keeps the integration's own entity object so it can be sent back
    unchanged; it never takes part in comparisons.
    """

    offset: int
    length: int
    type: EntityType
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class FormattedText:
    """Plain text plus ordered style spans."""

    text: str
    entities: Tuple[TextEntity, ...] = ()
    kind: TextKind = TextKind.PLAIN
    extra: Optional[str] = None


@dataclass(frozen=True)
class MessageContent:
    kind: ContentKind
    text: Optional[FormattedText] = None


@dataclass(frozen=True)
class UserSender:
    """Message authored directly by a user or bot account."""

    user_id: int


@dataclass(frozen=True)
class ChatSender:
    """Message attributed to a chat, e.g. a channel post mirrored into its group."""

    chat_id: int


Sender = Union[UserSender, ChatSender]


@dataclass(frozen=True)
class ChannelMessage:
    """Minimal message view used by the dispatcher and correlator."""

    id: int
    chat_id: int
    thread_id: int
    sender: Optional[Sender]
    content: MessageContent


@dataclass(frozen=True)
class NewMessage:
    message: ChannelMessage


@dataclass(frozen=True)
class IgnoredUpdate:
    """Any update kind the dispatcher does not act on."""

    name: str


Update = Union[NewMessage, IgnoredUpdate]
