from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator

from ..._logging import get_logger

CONNECTION_TIMEOUT = 5000
READ_TIMEOUT = 10000

logger = get_logger("sources.jsonapi.config")

_TIMEOUT_DEFAULTS = {
    "connection_timeout": CONNECTION_TIMEOUT,
    "read_timeout": READ_TIMEOUT,
}


class JSONAPIConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    base_url: str | None = None
    encoding: str | None = None
    connection_timeout: int = CONNECTION_TIMEOUT
    read_timeout: int = READ_TIMEOUT

    @field_validator("base_url", "encoding", mode="before")
    @classmethod
    def blank_as_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value:
            return None
        return value

    @field_validator("connection_timeout", "read_timeout", mode="before")
    @classmethod
    def fallback_on_malformed_timeout(cls, value: Any, info: ValidationInfo) -> int:
        default = _TIMEOUT_DEFAULTS[info.field_name]
        if value is None:
            return default

        timeout: int | None = None
        if isinstance(value, int) and not isinstance(value, bool):
            timeout = value
        elif isinstance(value, str):
            try:
                timeout = int(value.strip())
            except ValueError:
                timeout = None

        if timeout is None or timeout <= 0:
            logger.warning("Invalid %s: %r, using default %sms", info.field_name, value, default)
            return default
        return timeout

    @property
    def timeout_seconds(self) -> tuple[float, float]:
        """(connect, read) pair in the form requests expects."""
        return self.connection_timeout / 1000, self.read_timeout / 1000
