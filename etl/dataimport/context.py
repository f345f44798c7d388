"""Import-session state shared between the driver, entity processors and data sources."""

import re
from threading import Lock
from typing import Any, Mapping

from ._logging import get_logger

logger = get_logger("context")

_TOKEN_PATTERN = re.compile(r"\$\{([^}]+)\}")


class QueryCounter:
    """Count of source requests issued during one import session."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._value = 0

    def increment(self) -> int:
        with self._lock:
            self._value += 1
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def _lookup(variables: Mapping[str, Any], name: str) -> Any:
    """Resolve ``a.b.c`` as a flat key first, then as nested mappings."""
    if name in variables:
        return variables[name]

    current: Any = variables
    for part in name.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current


class Context:
    def __init__(
        self,
        variables: Mapping[str, Any] | None = None,
        entity_attributes: Mapping[str, str] | None = None,
        data_source: Any = None,
        counter: QueryCounter | None = None,
    ):
        self.variables = dict(variables or {})
        self.entity_attributes = dict(entity_attributes or {})
        self.data_source = data_source
        self.counter = counter or QueryCounter()

    def replace_tokens(self, text: str | None) -> str | None:
        """Substitute ``${name}`` placeholders; unknown names become empty strings."""
        if text is None or "${" not in text:
            return text

        def substitute(match: re.Match) -> str:
            value = _lookup(self.variables, match.group(1).strip())
            if value is None:
                logger.debug("No value for template variable %s", match.group(1))
                return ""
            return str(value)

        return _TOKEN_PATTERN.sub(substitute, text)

    def get_resolved_entity_attribute(self, name: str) -> str | None:
        return self.replace_tokens(self.entity_attributes.get(name))
