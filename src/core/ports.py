"""Ports (interfaces) used by the relay core.

Ports define the minimal contracts for the chat client and the update stream
so that the core can run against Telethon or against a test double that
replays canned updates and records emitted actions.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol

from core.models import FormattedText, Update


class UpdateStream(Protocol):
    """Ordered stream of updates; iteration ends when the client shuts down."""

    def __aiter__(self) -> AsyncIterator[Update]:
        ...


class ChatClientPort(Protocol):
    """Chat operations required by the relay core."""

    async def forward_message(
        self,
        from_chat_id: int,
        to_chat_id: int,
        message_id: int,
        as_copy: bool,
    ) -> None:
        ...

    async def send_reply(
        self,
        chat_id: int,
        thread_id: int,
        reply_to_message_id: int,
        content: FormattedText,
        silent: bool,
    ) -> None:
        ...

    def parse_markdown(self, text: str) -> FormattedText:
        ...
