import codecs
import re

UTF_8 = "UTF-8"

CHARSET_PATTERN = re.compile(r".*?charset=(.*)$", re.IGNORECASE)


def charset_from_content_type(content_type: str | None) -> str | None:
    """Return everything after ``charset=`` in a Content-Type value, verbatim."""
    if not content_type:
        return None
    match = CHARSET_PATTERN.search(content_type)
    if match is None:
        return None
    return match.group(1)


def resolve_encoding(content_type: str | None, override: str | None = None) -> str:
    """Pick the charset for one response body.

    A configured override always wins; otherwise the response header decides,
    falling back to UTF-8.
    """
    if override:
        return override
    return charset_from_content_type(content_type) or UTF_8


_CHARSET_TOKEN = re.compile(r"^[A-Za-z0-9._:+-]+$")
_UTF_16_BOMS = (codecs.BOM_UTF16_BE, codecs.BOM_UTF16_LE)


def decode_body(body: bytes, encoding: str) -> str:
    """Decode a response body with a bare charset name.

    Quoted or parameterised values are rejected rather than cleaned up. UTF-16
    without a byte-order mark is read big-endian.
    """
    if not _CHARSET_TOKEN.match(encoding):
        raise LookupError(f"unknown encoding: {encoding}")

    codec = codecs.lookup(encoding)
    if codec.name == "utf-16" and not body.startswith(_UTF_16_BOMS):
        codec = codecs.lookup("utf-16-be")
    return codec.decode(body)[0]
