"""Telethon implementation of the chat client and update stream ports."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator

from telethon import TelegramClient, events

from adapters.telegram_mapper import build_channel_message, parse_markdown, to_telethon_entities
from core.models import FormattedText, NewMessage, Update

LOGGER = logging.getLogger(__name__)

_CLOSED = object()


class TelethonChatClient:
    """Chat client adapter that satisfies ChatClientPort."""

    def __init__(self, client: TelegramClient) -> None:
        self._client = client

    async def forward_message(
        self,
        from_chat_id: int,
        to_chat_id: int,
        message_id: int,
        as_copy: bool,
    ) -> None:
        # drop_author sends a copy without the "forwarded from" header.
        await self._client.forward_messages(
            to_chat_id,
            message_id,
            from_peer=from_chat_id,
            drop_author=as_copy,
        )

    async def send_reply(
        self,
        chat_id: int,
        thread_id: int,
        reply_to_message_id: int,
        content: FormattedText,
        silent: bool,
    ) -> None:
        # Telegram files a reply into the thread of the message it replies to;
        # reply_to alone decides the thread.
        await self._client.send_message(
            chat_id,
            content.text,
            formatting_entities=to_telethon_entities(content.entities),
            reply_to=reply_to_message_id,
            silent=silent,
        )

    def parse_markdown(self, text: str) -> FormattedText:
        return parse_markdown(text)


class TelethonUpdateStream:
    """Queue-backed update stream fed by Telethon event handlers.

    Handlers only enqueue; the dispatcher drains the queue one update at a time
    so processing order always matches arrival order.
    """

    def __init__(self, client: TelegramClient) -> None:
        self._client = client
        self._queue: asyncio.Queue = asyncio.Queue()

    def attach(self) -> None:
        self._client.add_event_handler(self._on_new_message, events.NewMessage())

    def detach(self) -> None:
        self._client.remove_event_handler(self._on_new_message)

    def close(self) -> None:
        self._queue.put_nowait(_CLOSED)

    def push(self, update: Update) -> None:
        self._queue.put_nowait(update)

    async def _on_new_message(self, event) -> None:
        try:
            message = build_channel_message(event.message)
        except Exception:
            LOGGER.exception("Failed to map incoming message")
            return
        self.push(NewMessage(message))

    async def __aiter__(self) -> AsyncIterator[Update]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item
