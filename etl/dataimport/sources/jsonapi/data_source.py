"""Data source for JSON APIs that paginate through ``links.next``.

Every page is fetched with one blocking GET, decoded with the charset picked
by :func:`resolve_encoding`, validated as a :class:`PageEnvelope`, and its
records appended in page order. Any failure aborts the whole fetch with a
single :class:`DataImportError`; records from earlier pages are dropped.
"""

import re

import requests
from pydantic import AnyUrl, TypeAdapter

from ..._config import load_connection_config
from ..._logging import get_logger, redact_config, redact_url
from ...context import Context, QueryCounter
from ...exceptions import DataImportError
from ..base_connector import Record
from .config import JSONAPIConfig
from .encoding import decode_body, resolve_encoding
from .envelope import PageEnvelope

URI_METHOD = re.compile(r"\w{3,}:/")

_URL_ADAPTER = TypeAdapter(AnyUrl)


def resolve_url(query: str, base_url: str | None) -> str:
    """Use absolute queries verbatim, otherwise append the query to ``base_url`` as-is."""
    if URI_METHOD.search(query):
        return query
    return f"{base_url or ''}{query}"


def _ensure_valid_url(url: str) -> str:
    """Validate without normalizing; the raw string is what gets requested."""
    parsed = _URL_ADAPTER.validate_python(url)
    if not parsed.host:
        raise ValueError(f"Not a valid URL: {url!r}")
    return url


class JSONAPIDataSource:
    def __init__(
        self,
        base_url: str | None = None,
        encoding: str | None = None,
        connection_timeout: int | str | None = None,
        read_timeout: int | str | None = None,
        *,
        config: dict | None = None,
        file_path: str | None = None,
        env_prefix: str = "JSONAPI",
        context: Context | None = None,
        counter: QueryCounter | None = None,
    ):
        merged_config = load_connection_config(
            config,
            file_path=file_path,
            env_prefix=env_prefix,
            overrides={
                "base_url": base_url,
                "encoding": encoding,
                "connection_timeout": connection_timeout,
                "read_timeout": read_timeout,
            },
            resolver=context.replace_tokens if context is not None else None,
        )
        self.config = JSONAPIConfig.model_validate(merged_config)
        self.logger = get_logger("sources.jsonapi.data_source")

        if counter is None:
            counter = context.counter if context is not None else QueryCounter()
        self.counter = counter

        self.logger.info("JSON API data source initialized with config=%s", redact_config(self.config.model_dump()))

    @property
    def base_url(self) -> str | None:
        return self.config.base_url

    def fetch(self, query: str) -> list[Record]:
        url: str | None = resolve_url(query, self.config.base_url)
        self.logger.debug("Accessing URL: %s", redact_url(url))

        records: list[Record] = []
        pages = 0
        try:
            while url is not None:
                envelope = self.fetch_page(url)
                records.extend(envelope.data)
                pages += 1
                url = envelope.next_url
        except Exception as exc:
            self.logger.exception("Exception thrown while getting data from %s", redact_url(url))
            raise DataImportError(f"Exception in invoking url {redact_url(url)}", url=url) from exc

        self.logger.info("Fetched %s records across %s pages", len(records), pages)
        return records

    def fetch_page(self, url: str) -> PageEnvelope:
        """Fetch and decode a single page; the connection is released before returning."""
        _ensure_valid_url(url)

        response = requests.get(url, timeout=self.config.timeout_seconds)
        with response:
            response.raise_for_status()
            self.counter.increment()
            encoding = resolve_encoding(response.headers.get("Content-Type"), self.config.encoding)
            body = decode_body(response.content, encoding)

        self.logger.info("Fetched page %s decoded as %s", redact_url(url), encoding)
        return PageEnvelope.model_validate_json(body)


def test_jsonapi_connection(query: str, *, raise_on_error: bool = False, **source_kwargs) -> bool:
    """Fetch only the first page for ``query`` and report whether it decoded."""
    source = JSONAPIDataSource(**source_kwargs)
    url = resolve_url(query, source.base_url)
    try:
        source.fetch_page(url)
        return True
    except Exception:
        if raise_on_error:
            raise
        return False
