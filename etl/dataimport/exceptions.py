"""Errors raised by data sources and entity processors."""

SEVERE = "severe"
WARN = "warn"
SKIP = "skip"


class DataImportError(RuntimeError):
    """Failure while importing data for an entity.

    ``severity`` tells the import driver how to react. Data sources in this
    package only raise ``SEVERE`` errors, which abort the run for the entity.
    ``url`` is set when the failure happened while a URL was being accessed.
    """

    def __init__(self, message: str, *, severity: str = SEVERE, url: str | None = None):
        super().__init__(message)
        self.severity = severity
        self.url = url

    @property
    def is_severe(self) -> bool:
        return self.severity == SEVERE
