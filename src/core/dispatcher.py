"""Core update dispatcher.

This module is integration-agnostic. It only relies on the chat client port
and the update stream port, enabling other adapters without changes here.

Each update is routed by the chat it belongs to:
1) source channel -> filter -> relay into the target channel
2) discussion group -> correlator -> threaded comment
3) anything else -> ignored

Updates are handled one at a time, in arrival order, each to completion.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from core.actions import CommentPoster, RelayExecutor
from core.config import RelayConfig
from core.correlator import should_comment
from core.errors import TransientActionError
from core.filter_engine import should_forward
from core.formatted_text import extract_text
from core.models import ChannelMessage, NewMessage, Update
from core.ports import ChatClientPort, UpdateStream

LOGGER = logging.getLogger(__name__)


@dataclass
class DispatchStats:
    """Counters reported when the update stream closes."""

    received: int = 0
    relayed: int = 0
    filtered: int = 0
    commented: int = 0
    failed: int = 0


class UpdateDispatcher:
    """Routes updates to the relay or comment path."""

    def __init__(self, client: ChatClientPort, config: RelayConfig) -> None:
        self._config = config
        self._relay = RelayExecutor(client, config)
        self._poster = CommentPoster(client, config)
        self.stats = DispatchStats()

    async def run(self, stream: UpdateStream) -> DispatchStats:
        """Drain the stream until it closes, awaiting each update in turn."""

        async for update in stream:
            await self.handle(update)

        LOGGER.info(
            "Update stream closed: received=%s, relayed=%s, filtered=%s, commented=%s, failed=%s",
            self.stats.received,
            self.stats.relayed,
            self.stats.filtered,
            self.stats.commented,
            self.stats.failed,
        )
        return self.stats

    async def handle(self, update: Update) -> None:
        """Process one update through the routing table."""

        if not isinstance(update, NewMessage):
            return

        self.stats.received += 1
        message = update.message
        try:
            if message.chat_id == self._config.source_chat_id:
                await self._handle_source_message(message)
            elif self._config.discussion_chat_id and message.chat_id == self._config.discussion_chat_id:
                await self._handle_discussion_message(message)
        except TransientActionError:
            # Already logged by the action; the next update must still run.
            self.stats.failed += 1

    async def _handle_source_message(self, message: ChannelMessage) -> None:
        if not should_forward(extract_text(message.content), self._config.ignore_pattern):
            LOGGER.info("Message %s was not forwarded", message.id)
            self.stats.filtered += 1
            return

        LOGGER.info("New message from source channel: %s", message.id)
        await self._relay.relay(message.id)
        self.stats.relayed += 1

    async def _handle_discussion_message(self, message: ChannelMessage) -> None:
        if not should_comment(message, self._config):
            return

        LOGGER.info("Message %s is valid, posting comment", message.id)
        await self._poster.post_comment(message)
        self.stats.commented += 1
