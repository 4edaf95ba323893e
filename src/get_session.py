"""Interactive Telegram login for the relay account.

Authorization finishes before any update reaches the dispatcher; the core
never sees a half-authorized client. Can also be run directly to create the
session file ahead of time.
"""

import asyncio
import logging
from getpass import getpass
from typing import Optional

import qrcode
from telethon import TelegramClient, errors

from client import build_client
from settings import Settings, load_settings

LOGGER = logging.getLogger(__name__)


def _print_qr(url: str) -> None:
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(invert=True)


def _resolve_2fa_password(settings: Settings) -> str:
    if settings.password:
        return settings.password
    return getpass("2FA password: ")


async def _authorize_with_qr(client: TelegramClient) -> None:
    qr = await client.qr_login()
    _print_qr(qr.url)
    await qr.wait(timeout=120)


async def _authorize_with_phone(client: TelegramClient, settings: Settings) -> None:
    phone = settings.phone_number or input("Phone number (international format): ").strip()
    await client.send_code_request(phone)
    code = input("Login code: ").strip()
    try:
        await client.sign_in(phone=phone, code=code)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_resolve_2fa_password(settings))


def _pick_login_method(settings: Settings) -> str:
    if settings.login_method in {"qr", "phone"}:
        return settings.login_method
    # A configured phone number implies the code flow.
    if settings.phone_number:
        return "phone"
    while True:
        print("")
        print("Login methods:")
        print("[1] QR code")
        print("[2] Phone code")
        print("[3] Exit")
        print("Select a login method: \n")
        choice = input("relay > ").strip()
        if choice == "1":
            return "qr"
        elif choice == "2":
            return "phone"
        elif choice == "3":
            raise SystemExit(0)
        else:
            print("Invalid option. Please choose 1, 2, or 3.")


async def authorize(client: TelegramClient, settings: Settings) -> None:
    if await client.is_user_authorized():
        return

    try:
        method = _pick_login_method(settings)
        if method == "phone":
            await _authorize_with_phone(client, settings)
        else:
            await _authorize_with_qr(client)
    except errors.SessionPasswordNeededError:
        await client.sign_in(password=_resolve_2fa_password(settings))

    LOGGER.info("Authorization successful")


async def describe_account(client: TelegramClient) -> Optional[str]:
    me = await client.get_me()
    if me is None:
        return None
    name = " ".join(part for part in [me.first_name, me.last_name] if part)
    if me.username:
        return f"{name} (@{me.username}, id={me.id})"
    return f"{name} (id={me.id})"


async def main() -> None:
    settings = load_settings()
    client = build_client(settings)
    await client.connect()

    await authorize(client, settings)

    LOGGER.info("Logged in as: %s", await describe_account(client))

    await client.disconnect()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main())
