from typing import Final, Iterator, Sequence

from ..base_connector import Record


class _EndOfRows:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END_OF_ROWS"


END_OF_ROWS: Final = _EndOfRows()


class RowCursor:
    """Forward-only cursor over a fully fetched record list.

    Exhaustion is not an error: :meth:`next` keeps returning ``END_OF_ROWS``.
    """

    def __init__(self, records: Sequence[Record]):
        self._records = records
        self._position = 0

    def has_next(self) -> bool:
        return self._position < len(self._records)

    def next(self) -> Record | _EndOfRows:
        if not self.has_next():
            return END_OF_ROWS
        record = self._records[self._position]
        self._position += 1
        return record

    @property
    def remaining(self) -> int:
        return len(self._records) - self._position

    def __iter__(self) -> Iterator[Record]:
        while self.has_next():
            yield self.next()
