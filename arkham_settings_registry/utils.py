"""Utility functions for the settings registry."""

import logging
from typing import Any, FrozenSet, Optional

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_log_level(level_str: str) -> int:
    """Level for ARKHAM_SETTINGS_LOG_LEVEL; unknown names fall back to INFO."""
    name = level_str.upper()
    return getattr(logging, name) if name in _LEVELS else logging.INFO


def parse_env_bool(value: Optional[str], default: bool = False) -> bool:
    """Read a flag such as ARKHAM_SETTINGS_DEVELOPMENT ("true", "1", "yes", "on")."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def parse_id_list(value: Optional[str]) -> FrozenSet[str]:
    """Parse a comma-separated list of setting ids.

    Entries are trimmed and empty entries dropped, so "a, b,," gives {"a", "b"}.
    """
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


def _short(value: Any, limit: int = 64) -> str:
    text = str(value)
    return text if len(text) <= limit else text[:limit - 3] + "..."


def format_error_message(
    message: str,
    exc: Optional[Exception] = None,
    *,
    max_context_items: int = 8,
    **context: Any,
) -> str:
    """
    One-line diagnostic for the registry log.

    format_error_message("Invalid setting stored", err, setting_id="Retries", type="int")
    gives "Invalid setting stored (setting_id=Retries type=int): Value for setting Retries must be a number".
    """
    pairs = " ".join(f"{key}={_short(value)}" for key, value in list(context.items())[:max_context_items])
    text = f"{message} ({pairs})" if pairs else message
    detail = str(exc) if exc is not None else ""
    return f"{text}: {detail}" if detail else text
