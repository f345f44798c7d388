"""Layered configuration loader shared by data sources."""

import json
import os
from pathlib import Path
from typing import Any, Callable

from ._logging import get_logger, redact_config

LOGGER = get_logger("config")


def _read_prefixed_env(prefix: str) -> dict[str, Any]:
    """Read environment keys matching <PREFIX>_* and normalize key names."""
    prefix_token = f"{prefix.upper()}_"
    values: dict[str, Any] = {}

    for key, value in os.environ.items():
        if key.startswith(prefix_token):
            values[key.removeprefix(prefix_token).lower()] = value

    LOGGER.debug("Loaded %s config keys from environment prefix %s", len(values), prefix_token)
    return values


def _read_json_file(file_path: str | None) -> dict[str, Any]:
    """Read a JSON config file when provided, otherwise return an empty mapping."""
    if not file_path:
        return {}

    path = Path(file_path)
    if not path.exists():
        LOGGER.error("Config file not found: %s", file_path)
        raise FileNotFoundError(f"Config file not found: {file_path}")

    raw_data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw_data, dict):
        raise ValueError("Config file must contain a JSON object at the root")

    LOGGER.debug("Loaded JSON config from %s", file_path)
    return raw_data


def _not_none_values(values: dict[str, Any] | None) -> dict[str, Any]:
    """Drop keys with None values so absent options fall through to earlier layers."""
    if not values:
        return {}
    return {key: value for key, value in values.items() if value is not None}


def _replace_string_tokens(config: dict[str, Any], resolver: Callable[[str], str]) -> dict[str, Any]:
    return {key: resolver(value) if isinstance(value, str) else value for key, value in config.items()}


def _ensure_required_keys(config: dict[str, Any], required: tuple[str, ...]) -> None:
    missing = [key for key in required if config.get(key) in (None, "")]
    if missing:
        joined = ", ".join(missing)
        LOGGER.error("Required config keys missing: %s", joined)
        raise ValueError(f"Missing required connection config keys: {joined}")


def load_connection_config(
    config: dict[str, Any] | None = None,
    *,
    file_path: str | None = None,
    env_prefix: str | None = None,
    required: tuple[str, ...] = (),
    defaults: dict[str, Any] | None = None,
    overrides: dict[str, Any] | None = None,
    resolver: Callable[[str], str] | None = None,
) -> dict[str, Any]:
    """Resolve final data source config from defaults, file, env, config, and overrides.

    Later layers win. When ``resolver`` is given, every string value of the
    merged result is passed through it, so templated values such as
    ``${env.API_ROOT}`` reach the data source already substituted.
    """
    merged: dict[str, Any] = {}
    for layer in (
        defaults or {},
        _read_json_file(file_path),
        _read_prefixed_env(env_prefix) if env_prefix else {},
        config or {},
        _not_none_values(overrides),
    ):
        merged.update(layer)

    if resolver is not None:
        merged = _replace_string_tokens(merged, resolver)

    _ensure_required_keys(merged, required)
    LOGGER.info("Connection config resolved: %s", redact_config(merged))
    return merged
