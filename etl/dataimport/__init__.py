"""Public entrypoints for building data sources and running health checks."""

from .context import Context, QueryCounter
from .exceptions import SEVERE, DataImportError
from .sources.factory import create_connector, load_connector_config
from .sources.jsonapi import (
    END_OF_ROWS,
    JSONAPIDataSource,
    JSONAPIEntityProcessor,
    RowCursor,
    test_jsonapi_connection,
)


def test_connection(config: dict, query: str, **kwargs) -> bool:
    """Run a lightweight health check for the data source described by ``config``."""
    protocol = str(config.get("protocol", "")).strip().lower()

    if protocol in {"jsonapi", "json_api", "json-api"}:
        payload = {key: value for key, value in config.items() if key != "protocol"}
        return test_jsonapi_connection(query, **payload, **kwargs)

    raise ValueError(f"Unsupported protocol '{config.get('protocol')}'. Use one of: jsonapi")


__all__ = [
    "Context",
    "QueryCounter",
    "DataImportError",
    "SEVERE",
    "END_OF_ROWS",
    "JSONAPIDataSource",
    "JSONAPIEntityProcessor",
    "RowCursor",
    "create_connector",
    "load_connector_config",
    "test_connection",
]
