from ...context import Context
from ...exceptions import DataImportError
from ..base_connector import Record
from .cursor import END_OF_ROWS, RowCursor

URL = "url"


class JSONAPIEntityProcessor:
    """Serve the rows of one entity's ``url`` attribute through ``next_row``."""

    def __init__(self) -> None:
        self.url: str | None = None
        self._cursor: RowCursor | None = None

    def init(self, context: Context) -> None:
        url = context.get_resolved_entity_attribute(URL)
        if not url:
            raise DataImportError(f"'{URL}' is a required attribute")
        if context.data_source is None:
            raise DataImportError("No data source configured for entity")

        self.url = url
        self._cursor = RowCursor(context.data_source.fetch(url))

    def next_row(self) -> Record | None:
        if self._cursor is None:
            raise RuntimeError("Entity processor is not initialized. Call init() first.")

        row = self._cursor.next()
        if row is END_OF_ROWS:
            return None
        return row
