from __future__ import annotations

import logging

from app import _RedactingFormatter


def _record(message: str, *args) -> logging.LogRecord:
    return logging.LogRecord("relay", logging.INFO, __file__, 1, message, args, None)


def test_redacting_formatter_masks_secrets() -> None:
    formatter = _RedactingFormatter(["hash123", "hash123456", ""], fmt="%(message)s")

    line = formatter.format(_record("login with %s and %s", "hash123456", "hash123"))

    assert line == "login with *** and ***"


def test_redacting_formatter_without_secrets_is_passthrough() -> None:
    formatter = _RedactingFormatter([], fmt="%(levelname)s %(message)s")
    assert formatter.format(_record("Message %s forwarded successfully", 5)) == "INFO Message 5 forwarded successfully"
