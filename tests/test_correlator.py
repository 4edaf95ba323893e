from __future__ import annotations

from typing import Optional

from core.config import RelayConfig
from core.correlator import should_comment
from core.models import (
    ChannelMessage,
    ChatSender,
    ContentKind,
    EntityType,
    FormattedText,
    MessageContent,
    TextEntity,
    TextKind,
    UserSender,
)

SOURCE = -1001
TARGET = -1002
DISCUSSION = -1003

TEMPLATE = FormattedText(
    "Join our group!",
    (TextEntity(0, 4, EntityType.BOLD),),
    TextKind.PARSED,
)


def _config(template: Optional[FormattedText] = TEMPLATE) -> RelayConfig:
    return RelayConfig(
        source_chat_id=SOURCE,
        target_chat_id=TARGET,
        discussion_chat_id=DISCUSSION,
        comment_template=template,
    )


def _message(sender, text: Optional[FormattedText], kind: ContentKind = ContentKind.TEXT) -> ChannelMessage:
    return ChannelMessage(
        id=50,
        chat_id=DISCUSSION,
        thread_id=50,
        sender=sender,
        content=MessageContent(kind=kind, text=text),
    )


def _post(value: str) -> FormattedText:
    return FormattedText(value, (), TextKind.PARSED)


def test_no_template_disables_comments() -> None:
    message = _message(ChatSender(TARGET), _post("original post"))
    assert not should_comment(message, _config(template=None))


def test_mirrored_target_post_gets_comment() -> None:
    message = _message(ChatSender(TARGET), _post("original post"))
    assert should_comment(message, _config())


def test_own_comment_is_never_answered() -> None:
    echoed = FormattedText(TEMPLATE.text, (TextEntity(0, 4, EntityType.BOLD),), TextKind.PARSED)
    assert not should_comment(_message(ChatSender(TARGET), echoed), _config())
    # Even if it somehow arrives attributed to a user.
    assert not should_comment(_message(UserSender(7), echoed), _config())


def test_user_messages_are_ignored() -> None:
    assert not should_comment(_message(UserSender(7), _post("nice post")), _config())


def test_other_chats_are_ignored() -> None:
    assert not should_comment(_message(ChatSender(SOURCE), _post("original post")), _config())
    assert not should_comment(_message(ChatSender(DISCUSSION), _post("anonymous admin")), _config())


def test_unknown_sender_is_closed_default() -> None:
    assert not should_comment(_message(None, _post("original post")), _config())


def test_media_without_caption_still_commented() -> None:
    message = _message(ChatSender(TARGET), None, kind=ContentKind.OTHER)
    assert should_comment(message, _config())


def test_caption_equal_to_template_is_ignored() -> None:
    message = _message(ChatSender(TARGET), TEMPLATE, kind=ContentKind.PHOTO)
    assert not should_comment(message, _config())
