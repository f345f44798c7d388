"""Data source factory that maps a protocol name to its data source module."""

from __future__ import annotations

import importlib
import inspect
import json
from pathlib import Path
from typing import Any

import yaml

from .._logging import get_logger, redact_config
from .base_connector import Fetchable

logger = get_logger("sources.factory")
_SOURCES_PACKAGE = "dataimport.sources"


def load_connector_config(config: dict[str, Any] | str | Path) -> dict[str, Any]:
    """Load data source config from dict, JSON file, or YAML file."""
    if isinstance(config, dict):
        return config

    config_path = Path(config)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    suffix = config_path.suffix.lower()
    content = config_path.read_text(encoding="utf-8")

    if suffix == ".json":
        data = json.loads(content)
    elif suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(content)
    else:
        raise ValueError("Unsupported config format. Use JSON (.json) or YAML (.yaml/.yml).")

    if not isinstance(data, dict):
        raise ValueError("Connector configuration must be a key-value object.")

    return data


def create_connector(config: dict[str, Any] | str | Path, **extra: Any) -> Fetchable:
    """Instantiate the data source class inferred from the protocol field.

    ``extra`` carries runtime collaborators (context, query counter) that do
    not belong in a config file.
    """
    resolved_config = load_connector_config(config)
    protocol = _normalize_protocol(resolved_config.get("protocol"))

    payload = dict(resolved_config)
    payload.pop("protocol", None)

    source_class = _resolve_source_class(protocol)
    logger.info("Creating data source protocol=%s class=%s config=%s", protocol, source_class.__name__, redact_config(payload))

    try:
        return source_class(**payload, **extra)
    except TypeError as exc:
        raise TypeError(
            f"Invalid parameters for protocol '{protocol}' using data source '{source_class.__name__}': {exc}"
        ) from exc


def _normalize_protocol(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Missing required 'protocol' field in connector configuration.")
    return value.strip().lower()


def _resolve_source_class(protocol: str) -> type:
    """Import `<sources>.<protocol>.data_source` and pick its Fetchable class."""
    module_name = f"{_SOURCES_PACKAGE}.{protocol}.data_source"
    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as exc:
        # a missing third-party import inside the module is not an unknown protocol
        if exc.name is None or not module_name.startswith(exc.name):
            raise
        module = None

    if module is not None:
        candidates = [
            member
            for _, member in inspect.getmembers(module, inspect.isclass)
            if member.__module__ == module.__name__ and issubclass(member, Fetchable)
        ]
        preferred_class_name = f"{protocol}DataSource".lower()
        for member in candidates:
            if member.__name__.lower() == preferred_class_name:
                return member
        if candidates:
            return candidates[0]

    raise ValueError(
        f"Unsupported protocol '{protocol}'. Add a data source class in '{module_name}'."
    )


__all__ = ["load_connector_config", "create_connector"]
