"""Structural contracts between data sources, entity processors and the import driver."""

from typing import Protocol, runtime_checkable

from pydantic import JsonValue

Record = dict[str, JsonValue]


@runtime_checkable
class Fetchable(Protocol):
    def fetch(self, query: str) -> list[Record]:
        """Fetch every record the source holds for ``query``."""
        ...


@runtime_checkable
class RowProducible(Protocol):
    def next_row(self) -> Record | None:
        """Return the next row, or None once the rows are exhausted."""
        ...
