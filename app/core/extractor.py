"""
URI identifier extraction for MCP resource handlers.

Resource URIs have the shape ``{scheme}://{identifier}``. Handlers call
these helpers to pull out the identifier before they hit the API.
"""

from typing import Tuple
from urllib.parse import unquote

URI_SEPARATOR = "://"


class InvalidURIError(ValueError):
    """Raised when a resource URI does not have the expected shape."""


def _split_uri(uri: str) -> str:
    parts = uri.split(URI_SEPARATOR)
    if len(parts) != 2:
        raise InvalidURIError(f"invalid uri format: {uri!r}")
    return parts[1]


def extract_numeric_id_from_uri(uri: str) -> int:
    """Return the integer ID from a URI like ``droplet://12345``."""
    value = _split_uri(uri)
    try:
        return int(value, 10)
    except ValueError:
        raise InvalidURIError(f"invalid uri format: {uri!r}") from None


def extract_string_id_from_uri(uri: str) -> str:
    """Return the identifier from a URI like ``domains://example.com``.

    The identifier is returned verbatim, so ``droplet://`` yields ``""``.
    """
    return _split_uri(uri)


def extract_droplet_and_action_from_uri(uri: str) -> Tuple[int, int]:
    """Parse ``droplets://{id}/actions/{action_id}``."""
    value = _split_uri(uri)
    parts = value.split("/")
    if len(parts) != 3 or parts[1] != "actions":
        raise InvalidURIError(f"invalid uri format: {uri!r}")
    try:
        return int(parts[0], 10), int(parts[2], 10)
    except ValueError:
        raise InvalidURIError(f"invalid uri format: {uri!r}") from None


def extract_domain_and_record_from_uri(uri: str) -> Tuple[str, int]:
    """Parse ``domains://{name}/records/{record_id}``."""
    value = _split_uri(uri)
    parts = value.split("/")
    if len(parts) != 3 or parts[1] != "records" or not parts[0]:
        raise InvalidURIError(f"invalid uri format: {uri!r}")
    try:
        return parts[0], int(parts[2], 10)
    except ValueError:
        raise InvalidURIError(f"invalid uri format: {uri!r}") from None


def extract_ip_from_uri(uri: str) -> str:
    """Return the address from a reserved IP URI.

    IPv6 addresses may be bracketed (``reserved-ipv6://[2001:db8::1]``) or
    percent-encoded; both forms are normalised to the bare address.
    """
    value = unquote(_split_uri(uri))
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    return value
