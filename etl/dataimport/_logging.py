"""Logger factory plus helpers that keep secrets out of log lines."""

import logging
import os
from threading import Lock
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SETUP_LOCK = Lock()
_SETUP_DONE = False
_SENSITIVE_FRAGMENTS = (
    "password",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
)
_MASK = "***"


def _resolve_log_level() -> int:
    level_name = os.getenv("DATAIMPORT_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _setup_default_logging() -> None:
    global _SETUP_DONE
    if _SETUP_DONE:
        return

    with _SETUP_LOCK:
        if _SETUP_DONE:
            return

        root_logger = logging.getLogger()
        if not root_logger.handlers:
            logging.basicConfig(
                level=_resolve_log_level(),
                format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            )

        _SETUP_DONE = True


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(fragment in lowered for fragment in _SENSITIVE_FRAGMENTS)


def get_logger(name: str) -> logging.Logger:
    _setup_default_logging()
    return logging.getLogger(f"dataimport.{name}")


def redact_config(values: dict[str, Any]) -> dict[str, Any]:
    redacted: dict[str, Any] = {}
    for key, value in values.items():
        if _is_sensitive(str(key)) and value is not None:
            redacted[key] = _MASK
        else:
            redacted[key] = value
    return redacted


def redact_url(url: str | None) -> str | None:
    """Mask credential-like query parameters and userinfo in a URL."""
    if not url:
        return url

    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    netloc = parts.netloc
    if "@" in netloc:
        netloc = f"{_MASK}@{netloc.rsplit('@', 1)[1]}"

    query = parts.query
    if query:
        pairs = parse_qsl(query, keep_blank_values=True)
        if any(_is_sensitive(key) for key, _ in pairs):
            query = urlencode([(key, _MASK if _is_sensitive(key) else value) for key, value in pairs], safe="*")

    return urlunsplit((parts.scheme, netloc, parts.path, query, parts.fragment))
