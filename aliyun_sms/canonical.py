"""
Canonical forms used by the ACS3-HMAC-SHA256 signature.

Every function here is pure: the same input always produces the same
byte-exact output, which is what the server recomputes on its side.
"""

from typing import Iterable, Mapping, Tuple
from urllib.parse import quote

from .constants import SIGNED_HEADERS
from .exceptions import ConfigurationError, EncodingError


def encode_param(value: str) -> str:
    """
    Percent-encode a query parameter name or value.

    Only ASCII letters, digits and ``-._~`` are left as is; every other
    UTF-8 byte becomes an uppercase ``%XX`` triple (space is ``%20``,
    never ``+``).

    Args:
        value: Text to encode

    Returns:
        Encoded text

    Raises:
        EncodingError: If value is not a string or is not valid Unicode
    """
    if not isinstance(value, str):
        raise EncodingError(
            f"Expected str for query parameter, received {type(value).__name__}"
        )
    try:
        return quote(value, safe="", encoding="utf-8", errors="strict")
    except UnicodeEncodeError as e:
        raise EncodingError(f"Query parameter is not valid UTF-8: {e.reason}") from e


def generate_canonical_query_string(params: Iterable[Tuple[str, str]]) -> str:
    """Encode each pair as ``name=value``, sort the results and join with ``&``."""
    encoded_params = [
        f"{encode_param(name)}={encode_param(value)}"
        for name, value in params
    ]
    encoded_params.sort()
    return "&".join(encoded_params)


def build_canonical_headers(headers: Mapping[str, str]) -> str:
    """
    Build the canonical header block.

    Each signed header is emitted as ``name:value\\n`` in the fixed
    ascending order of ``SIGNED_HEADERS``, values stripped of surrounding
    whitespace. Header names are matched case-insensitively.

    Raises:
        ConfigurationError: If a signed header is missing
    """
    normalized = {name.lower(): value for name, value in headers.items()}
    lines = []
    for name in SIGNED_HEADERS:
        if name not in normalized:
            raise ConfigurationError(f"Missing signed header: {name}")
        lines.append(f"{name}:{str(normalized[name]).strip()}\n")
    return "".join(lines)


def signed_header_names() -> str:
    return ";".join(SIGNED_HEADERS)


def build_canonical_request(
    method: str,
    uri: str,
    query_string: str,
    header_block: str,
    signed_names: str,
    payload_hash: str,
) -> str:
    # header_block already ends with a newline, which leaves an empty line
    return "\n".join(
        (method, uri, query_string, header_block, signed_names, payload_hash)
    )
