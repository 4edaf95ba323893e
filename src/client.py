"""Telegram client factory for the relay.

We explicitly manage the client's lifecycle (connect/authorize/disconnect) so
it is obvious when the session is created and when it ends.
"""

from __future__ import annotations

import logging

from telethon import TelegramClient

from settings import Settings


def build_client(settings: Settings) -> TelegramClient:
    """Create a Telethon client from loaded settings.

    Updates are delivered sequentially so the relay never handles two
    messages at once.
    """

    logging.getLogger(__name__).info("Initializing Telegram client (session=%s)", settings.session_name)

    return TelegramClient(
        settings.session_name,
        settings.api_id,
        settings.api_hash,
        sequential_updates=True,
    )
