"""Error types raised by the relay core and its configuration layer."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Invalid or missing settings. Raised before the dispatcher starts."""


class TransientActionError(RuntimeError):
    """A single relay or comment request failed; the update is dropped."""

    def __init__(self, message_id: int, reason: str) -> None:
        super().__init__(f"message {message_id}: {reason}")
        self.message_id = message_id
        self.reason = reason


class RelayError(TransientActionError):
    pass


class CommentError(TransientActionError):
    pass
