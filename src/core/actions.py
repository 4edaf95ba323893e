"""Outbound actions: relaying a source post and posting the follow-up comment.

Each action makes exactly one request through the chat client port. Failures
are logged and re-raised as TransientActionError subclasses; nothing here
retries.
"""

from __future__ import annotations

import logging

from core.config import RelayConfig
from core.errors import CommentError, RelayError
from core.models import ChannelMessage
from core.ports import ChatClientPort

LOGGER = logging.getLogger(__name__)


class RelayExecutor:
    """Duplicates one source message into the target channel."""

    def __init__(self, client: ChatClientPort, config: RelayConfig) -> None:
        self._client = client
        self._config = config

    async def relay(self, message_id: int) -> None:
        try:
            await self._client.forward_message(
                from_chat_id=self._config.source_chat_id,
                to_chat_id=self._config.target_chat_id,
                message_id=message_id,
                as_copy=self._config.send_as_copy,
            )
        except Exception as exc:
            LOGGER.error("Error forwarding message %s: %s", message_id, exc)
            raise RelayError(message_id, str(exc)) from exc

        LOGGER.info("Message %s forwarded successfully", message_id)


class CommentPoster:
    """Replies to a mirrored post with the configured comment template."""

    def __init__(self, client: ChatClientPort, config: RelayConfig) -> None:
        self._client = client
        self._config = config

    async def post_comment(self, message: ChannelMessage) -> None:
        template = self._config.comment_template
        if template is None:
            raise CommentError(message.id, "no comment template configured")

        try:
            await self._client.send_reply(
                chat_id=self._config.discussion_chat_id,
                thread_id=message.thread_id,
                reply_to_message_id=message.id,
                content=template,
                silent=self._config.post_comment_silently,
            )
        except Exception as exc:
            LOGGER.error("Error posting comment for message %s: %s", message.id, exc)
            raise CommentError(message.id, str(exc)) from exc

        LOGGER.info("Comment posted for message %s", message.id)
