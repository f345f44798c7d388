from .config import JSONAPIConfig
from .cursor import END_OF_ROWS, RowCursor
from .data_source import JSONAPIDataSource, resolve_url, test_jsonapi_connection
from .encoding import resolve_encoding
from .entity_processor import JSONAPIEntityProcessor
from .envelope import PageEnvelope

__all__ = [
    "JSONAPIConfig",
    "JSONAPIDataSource",
    "JSONAPIEntityProcessor",
    "PageEnvelope",
    "RowCursor",
    "END_OF_ROWS",
    "resolve_encoding",
    "resolve_url",
    "test_jsonapi_connection",
]
