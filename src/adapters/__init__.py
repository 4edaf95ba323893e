"""Telethon adapters that plug the relay core into Telegram."""
