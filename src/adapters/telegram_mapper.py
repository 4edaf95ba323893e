"""Telegram-to-core message mapping adapter.

This keeps Telethon-specific details out of the core pipeline. Anything the
mapper does not recognise falls back to a closed default (OTHER content, no
sender, UNKNOWN entity) instead of raising.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from telethon import utils
from telethon.extensions import markdown
from telethon.tl import types
from telethon.tl.custom import Message

from core.models import (
    ChannelMessage,
    ChatSender,
    ContentKind,
    EntityType,
    FormattedText,
    MessageContent,
    Sender,
    TextEntity,
    TextKind,
    UserSender,
)

LOGGER = logging.getLogger(__name__)

_ENTITY_TYPES = {
    types.MessageEntityBold: EntityType.BOLD,
    types.MessageEntityItalic: EntityType.ITALIC,
    types.MessageEntityUnderline: EntityType.UNDERLINE,
    types.MessageEntityStrike: EntityType.STRIKETHROUGH,
    types.MessageEntitySpoiler: EntityType.SPOILER,
    types.MessageEntityCode: EntityType.CODE,
    types.MessageEntityPre: EntityType.PRE,
    types.MessageEntityTextUrl: EntityType.TEXT_URL,
    types.MessageEntityUrl: EntityType.URL,
    types.MessageEntityMention: EntityType.MENTION,
    types.MessageEntityMentionName: EntityType.MENTION_NAME,
    types.InputMessageEntityMentionName: EntityType.MENTION_NAME,
    types.MessageEntityHashtag: EntityType.HASHTAG,
    types.MessageEntityCashtag: EntityType.CASHTAG,
    types.MessageEntityBotCommand: EntityType.BOT_COMMAND,
    types.MessageEntityEmail: EntityType.EMAIL,
    types.MessageEntityPhone: EntityType.PHONE,
    types.MessageEntityBlockquote: EntityType.BLOCKQUOTE,
    types.MessageEntityCustomEmoji: EntityType.CUSTOM_EMOJI,
    types.MessageEntityBankCard: EntityType.BANK_CARD,
}

# Entity kinds that can be rebuilt from (offset, length) alone.
_SIMPLE_ENTITY_CLASSES = {
    EntityType.BOLD: types.MessageEntityBold,
    EntityType.ITALIC: types.MessageEntityItalic,
    EntityType.UNDERLINE: types.MessageEntityUnderline,
    EntityType.STRIKETHROUGH: types.MessageEntityStrike,
    EntityType.SPOILER: types.MessageEntitySpoiler,
    EntityType.CODE: types.MessageEntityCode,
    EntityType.URL: types.MessageEntityUrl,
    EntityType.MENTION: types.MessageEntityMention,
    EntityType.HASHTAG: types.MessageEntityHashtag,
    EntityType.CASHTAG: types.MessageEntityCashtag,
    EntityType.BOT_COMMAND: types.MessageEntityBotCommand,
    EntityType.EMAIL: types.MessageEntityEmail,
    EntityType.PHONE: types.MessageEntityPhone,
    EntityType.BANK_CARD: types.MessageEntityBankCard,
}


def to_text_entity(entity) -> TextEntity:
    entity_type = _ENTITY_TYPES.get(type(entity), EntityType.UNKNOWN)
    return TextEntity(offset=entity.offset, length=entity.length, type=entity_type, raw=entity)


def to_formatted_text(text: Optional[str], entities: Optional[Iterable] = None) -> FormattedText:
    """Build a PARSED FormattedText from Telegram text and entities."""

    return FormattedText(
        text=text or "",
        entities=tuple(to_text_entity(entity) for entity in entities or ()),
        kind=TextKind.PARSED,
    )


def to_telethon_entities(entities: Iterable[TextEntity]) -> List:
    """Return Telethon entities for sending, preferring the original objects."""

    result = []
    for entity in entities:
        if entity.raw is not None:
            result.append(entity.raw)
            continue
        if entity.type == EntityType.PRE:
            result.append(types.MessageEntityPre(entity.offset, entity.length, language=""))
            continue
        entity_class = _SIMPLE_ENTITY_CLASSES.get(entity.type)
        if entity_class is None:
            LOGGER.debug("Dropping %s entity without source data", entity.type.value)
            continue
        result.append(entity_class(entity.offset, entity.length))
    return result


def parse_markdown(text: str) -> FormattedText:
    """Render Telegram-flavoured markdown into a PARSED FormattedText.

    Telegram trims surrounding whitespace from sent messages, so the input is
    trimmed first to keep the rendered template equal to its echo.
    """

    plain, entities = markdown.parse(text.strip())
    return to_formatted_text(plain, entities)


def _content_kind(message: Message) -> ContentKind:
    # Stickers, GIFs, voice notes, audio and round videos are all documents in
    # Telegram, but none of them is a relayable caption carrier.
    if (
        getattr(message, "sticker", None)
        or getattr(message, "gif", None)
        or getattr(message, "voice", None)
        or getattr(message, "audio", None)
        or getattr(message, "video_note", None)
    ):
        return ContentKind.OTHER
    if getattr(message, "photo", None):
        return ContentKind.PHOTO
    if getattr(message, "video", None):
        return ContentKind.VIDEO
    if getattr(message, "document", None):
        return ContentKind.DOCUMENT

    media = getattr(message, "media", None)
    # A link preview does not change a text message into media.
    if media is None or isinstance(media, types.MessageMediaWebPage):
        return ContentKind.TEXT
    return ContentKind.OTHER


def build_content(message: Message) -> MessageContent:
    kind = _content_kind(message)
    if kind == ContentKind.OTHER:
        return MessageContent(kind=kind)
    text = to_formatted_text(getattr(message, "message", None), getattr(message, "entities", None))
    return MessageContent(kind=kind, text=text)


def sender_from_message(message: Message) -> Optional[Sender]:
    """Map Telegram's from_id onto a core sender.

    Broadcast posts carry no from_id; the chat itself is the author then.
    """

    from_id = getattr(message, "from_id", None)
    if from_id is None:
        return ChatSender(chat_id=message.chat_id)
    if isinstance(from_id, types.PeerUser):
        return UserSender(user_id=from_id.user_id)
    if isinstance(from_id, (types.PeerChannel, types.PeerChat)):
        return ChatSender(chat_id=utils.get_peer_id(from_id))
    return None


def _thread_id_from_message(message: Message) -> int:
    reply_to = getattr(message, "reply_to", None)
    if reply_to is None:
        # A top-level message starts its own thread.
        return message.id
    top_id = getattr(reply_to, "reply_to_top_id", None)
    if top_id:
        return top_id
    return getattr(reply_to, "reply_to_msg_id", None) or message.id


def build_channel_message(message: Message) -> ChannelMessage:
    """Build a core ChannelMessage from a Telethon Message."""

    return ChannelMessage(
        id=message.id,
        chat_id=message.chat_id,
        thread_id=_thread_id_from_message(message),
        sender=sender_from_message(message),
        content=build_content(message),
    )
