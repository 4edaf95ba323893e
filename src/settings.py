"""Environment-driven configuration for the relay.

All settings come from the process environment, optionally seeded from a
local .env file via python-dotenv so secrets stay out of the repo. The comment
template lives in its own markdown file (COMMENT_TEMPLATE_FILE).
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
import re
from typing import Callable, Mapping, Optional

from dotenv import load_dotenv

from core.config import RelayConfig
from core.errors import ConfigurationError
from core.filter_engine import compile_ignore_pattern
from core.models import FormattedText

LOGGER = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"
    telethon_level: str = "WARNING"
    file_path: Optional[str] = None
    file_max_bytes: int = 5 * 1024 * 1024
    file_backup_count: int = 5
    redact: bool = True


@dataclass(frozen=True)
class Settings:
    """Everything the app needs to start, parsed and validated once."""

    api_id: int
    api_hash: str = field(repr=False)
    phone_number: Optional[str] = field(default=None, repr=False)
    password: Optional[str] = field(default=None, repr=False)
    login_method: Optional[str] = None
    session_name: str = "relay"
    source_chat_id: int = 0
    target_chat_id: int = 0
    discussion_chat_id: int = 0
    ignore_regex: Optional[str] = None
    ignore_pattern: Optional[re.Pattern] = None
    comment_template_file: Optional[str] = None
    comment_template_text: Optional[str] = None
    post_comment_silently: bool = False
    show_forwarded: bool = False
    log_settings: LoggingSettings = field(default_factory=LoggingSettings)

    def secrets(self) -> list[str]:
        """Values that must never reach a log line."""

        return [value for value in (self.api_hash, self.phone_number, self.password) if value]

    def relay_config(self, parse_markdown: Callable[[str], FormattedText]) -> RelayConfig:
        """Build the immutable core config, rendering the comment template once."""

        template: Optional[FormattedText] = None
        if self.comment_template_text:
            try:
                template = parse_markdown(self.comment_template_text)
            except Exception:
                LOGGER.warning("Comment template could not be parsed; comments are disabled", exc_info=True)
                template = None

        return RelayConfig(
            source_chat_id=self.source_chat_id,
            target_chat_id=self.target_chat_id,
            discussion_chat_id=self.discussion_chat_id,
            ignore_pattern=self.ignore_pattern,
            comment_template=template,
            post_comment_silently=self.post_comment_silently,
            show_forwarded=self.show_forwarded,
        )


def _get(env: Mapping[str, str], key: str, default: Optional[str] = None) -> Optional[str]:
    value = env.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def _get_int(env: Mapping[str, str], key: str, default: Optional[int] = None) -> int:
    raw = _get(env, key)
    if raw is None:
        if default is None:
            raise ConfigurationError(f"Missing {key} in environment")
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {key}: {raw!r} is not an integer") from exc


def _get_bool(env: Mapping[str, str], key: str, default: bool) -> bool:
    raw = _get(env, key)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    LOGGER.warning("Ignoring unparseable %s=%r, using %s", key, raw, default)
    return default


def _read_template(path: Optional[str]) -> Optional[str]:
    """Return the template file contents, or None when comments are disabled."""

    if not path:
        return None
    if not os.path.isabs(path):
        path = os.path.join(os.getcwd(), path)
    if not os.path.exists(path):
        LOGGER.info("Comment template %s not found; comments are disabled", path)
        return None
    try:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        LOGGER.warning("Comment template %s could not be read (%s); comments are disabled", path, exc)
        return None
    return text if text.strip() else None


def _load_logging(env: Mapping[str, str]) -> LoggingSettings:
    return LoggingSettings(
        level=(_get(env, "LOG_LEVEL", "INFO") or "INFO").upper(),
        telethon_level=(_get(env, "TELETHON_LOG_LEVEL", "WARNING") or "WARNING").upper(),
        file_path=_get(env, "LOG_FILE"),
        file_max_bytes=_get_int(env, "LOG_FILE_MAX_BYTES", 5 * 1024 * 1024),
        file_backup_count=_get_int(env, "LOG_FILE_BACKUP_COUNT", 5),
        redact=_get_bool(env, "LOG_REDACT", True),
    )


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load and validate settings.

    With no explicit mapping the process environment is used, after merging a
    .env file if one exists. Raises ConfigurationError for anything that would
    make the relay misbehave later (missing ids, a broken IGNORE_REGEX).
    """

    if environ is None:
        load_dotenv()
        environ = os.environ
    env = environ

    api_hash = _get(env, "API_HASH")
    if not api_hash:
        raise ConfigurationError("Missing API_ID or API_HASH in environment")
    api_id = _get_int(env, "API_ID")

    login_method = (_get(env, "LOGIN_METHOD") or "").lower() or None
    if login_method not in {None, "phone", "qr"}:
        raise ConfigurationError("LOGIN_METHOD must be 'phone' or 'qr'")

    ignore_regex = _get(env, "IGNORE_REGEX")
    try:
        ignore_pattern = compile_ignore_pattern(ignore_regex)
    except re.error as exc:
        raise ConfigurationError(f"Invalid IGNORE_REGEX: {exc}") from exc

    template_file = _get(env, "COMMENT_TEMPLATE_FILE", "comment.md")

    return Settings(
        api_id=api_id,
        api_hash=api_hash,
        phone_number=_get(env, "PHONE_NUMBER"),
        password=_get(env, "2FA"),
        login_method=login_method,
        session_name=_get(env, "SESSION_NAME", "relay") or "relay",
        source_chat_id=_get_int(env, "SOURCE_CHANNEL_ID"),
        target_chat_id=_get_int(env, "TARGET_CHANNEL_ID"),
        discussion_chat_id=_get_int(env, "DISCUSSION_GROUP_ID", 0),
        ignore_regex=ignore_regex,
        ignore_pattern=ignore_pattern,
        comment_template_file=template_file,
        comment_template_text=_read_template(template_file),
        post_comment_silently=_get_bool(env, "POST_COMMENT_SILENTLY", False),
        show_forwarded=_get_bool(env, "SHOW_FORWARDED", False),
        log_settings=_load_logging(env),
    )
