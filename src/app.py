"""Application entry point for the channel relay."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Any, Optional

from art import tprint
from telethon import TelegramClient, utils
from telethon.tl.functions.channels import GetFullChannelRequest
from telethon.tl.types import PeerChannel

from adapters.telethon_client import TelethonChatClient, TelethonUpdateStream
from client import build_client
from core.config import RelayConfig
from core.dispatcher import UpdateDispatcher
from core.errors import ConfigurationError
from get_session import authorize, describe_account
from settings import PROJECT_ROOT, LoggingSettings, Settings, load_settings

NAME = "RELAY"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        # Longest first so a secret containing another is masked whole.
        self._secrets = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _configure_logging(config: LoggingSettings, secrets: list[str]) -> None:
    level = getattr(logging, config.level, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(secrets if config.redact else [], fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if config.file_path:
        path = config.file_path
        if not os.path.isabs(path):
            path = os.path.join(PROJECT_ROOT, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=config.file_max_bytes,
            backupCount=config.file_backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)
    logging.getLogger("telethon").setLevel(getattr(logging, config.telethon_level, logging.WARNING))


def _log_relay_config(config: RelayConfig, settings: Settings) -> None:
    LOGGER.info("Configuration loaded:")
    LOGGER.info("- Source Channel: %s", config.source_chat_id)
    LOGGER.info("- Target Channel: %s", config.target_chat_id)
    LOGGER.info("- Discussion Group: %s", config.discussion_chat_id or "disabled")
    LOGGER.info("- Ignore Regex: %s", settings.ignore_regex or "none")
    LOGGER.info("- Delivery: %s", "copy" if config.send_as_copy else "forward")
    if config.comments_enabled:
        LOGGER.info("- Comments: enabled (silent=%s)", config.post_comment_silently)
    elif config.discussion_chat_id:
        LOGGER.warning("- Comments: disabled, no usable template in %s", settings.comment_template_file)
    else:
        LOGGER.info("- Comments: disabled")


async def _wait_for_shutdown(consumer: asyncio.Future, disconnected: asyncio.Future) -> None:
    """Block until the client disconnects or the dispatcher stops, whichever is first.

    A dispatcher that died with an exception re-raises it here instead of
    leaving the process connected but idle.
    """

    done, _ = await asyncio.wait({consumer, disconnected}, return_when=asyncio.FIRST_COMPLETED)
    if consumer in done:
        consumer.result()


async def _serve(client: TelegramClient, settings: Settings) -> None:
    await client.connect()
    await authorize(client, settings)
    LOGGER.info("Logged in as: %s", await describe_account(client))

    chat_client = TelethonChatClient(client)
    relay_config = settings.relay_config(chat_client.parse_markdown)
    _log_relay_config(relay_config, settings)

    dispatcher = UpdateDispatcher(chat_client, relay_config)
    stream = TelethonUpdateStream(client)
    stream.attach()

    consumer = asyncio.ensure_future(dispatcher.run(stream))
    LOGGER.info("Listening for updates...")
    try:
        await _wait_for_shutdown(consumer, client.disconnected)
    finally:
        # Let queued updates finish before the consumer exits.
        stream.detach()
        stream.close()
        if not consumer.done():
            await consumer


def _run(settings: Settings) -> None:
    _print_banner()
    LOGGER.info("Starting relay")

    client = build_client(settings)
    try:
        client.loop.run_until_complete(_serve(client, settings))
    finally:
        if client.is_connected():
            client.loop.run_until_complete(client.disconnect())


def _login(settings: Settings) -> None:
    _print_banner()
    client = build_client(settings)

    async def _run_login() -> None:
        await client.connect()
        await authorize(client, settings)
        print(f"Logged in as: {await describe_account(client)}")
        await client.disconnect()

    client.loop.run_until_complete(_run_login())


def _dialog_type(dialog: Any) -> str:
    if getattr(dialog, "is_channel", False):
        entity = getattr(dialog, "entity", None)
        if getattr(entity, "megagroup", False):
            return "group"
        return "channel"
    if getattr(dialog, "is_group", False):
        return "group"
    if getattr(dialog, "is_user", False):
        return "user"
    return "chat"


def _dialog_title(dialog: Any) -> str:
    entity = getattr(dialog, "entity", None)
    title = getattr(entity, "title", None)
    if title:
        return str(title)
    name = getattr(dialog, "name", None)
    if name:
        return str(name)
    entity_id = getattr(entity, "id", None)
    return str(entity_id or "unknown")


async def _linked_chat_id(client: TelegramClient, dialog: Any) -> Optional[int]:
    """Return the marked id of a broadcast channel's discussion group."""

    try:
        full = await client(GetFullChannelRequest(dialog.entity))
    except Exception:
        LOGGER.exception("Failed to load channel details for %s", dialog.id)
        return None
    linked = getattr(full.full_chat, "linked_chat_id", None)
    if not linked:
        return None
    return utils.get_peer_id(PeerChannel(linked))


async def _list_dialogs(client: TelegramClient) -> None:
    # Channel and group ids are what the relay settings need; private chats are noise.
    lines = []
    async for dialog in client.iter_dialogs():
        dialog_type = _dialog_type(dialog)
        if dialog_type == "user":
            continue
        line = f"{dialog_type} | {_dialog_title(dialog)} | {dialog.id}"
        if dialog_type == "channel":
            linked = await _linked_chat_id(client, dialog)
            if linked:
                line = f"{line} | discussion {linked}"
        lines.append(line)

    if not lines:
        print("No channels or groups found for this account.")
        return

    for index, line in enumerate(lines, start=1):
        print(f"{index}. {line}")


def _discover(settings: Settings) -> None:
    _print_banner()
    client = build_client(settings)

    async def _run_discover() -> None:
        await client.connect()
        if not await client.is_user_authorized():
            print("Authorization required. Starting login...")
            await authorize(client, settings)
        await _list_dialogs(client)
        await client.disconnect()

    client.loop.run_until_complete(_run_discover())


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(prog="relay")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Start relaying posts (default)")
    subparsers.add_parser("login", help="Authorize the account and create the session file")
    subparsers.add_parser(
        "discover",
        help="List channels and groups with the ids used in the settings.",
    )

    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        raise SystemExit(f"Configuration error: {exc}") from exc
    _configure_logging(settings.log_settings, settings.secrets())

    if args.command == "login":
        _login(settings)
        return
    if args.command == "discover":
        _discover(settings)
        return
    _run(settings)


if __name__ == "__main__":
    main()
