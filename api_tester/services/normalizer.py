"""
Header and body normalization for outbound requests.

Turns a user-authored RequestDescriptor into a PreparedRequest: headers
become one canonical ordered sequence of pairs, the URL is validated
locally, and method-specific body rules are applied. Anything rejected
here never reaches the executor.
"""

import ipaddress
import json
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from .. import config
from ..exceptions import ValidationError
from ..schemas.execute import HeaderPair, PreparedRequest, RequestDescriptor


CONTENT_TYPE_HEADER = "Content-Type"
DEFAULT_CONTENT_TYPE = "application/json"

_ALLOWED_SCHEMES = ("http", "https")
_LOCAL_HOSTNAMES = ("localhost", "localhost.localdomain")


def to_header_pairs(
    headers: Iterable[HeaderPair] | Mapping[str, str] | None
) -> tuple[HeaderPair, ...]:
    """
    Convert list-form or mapping-form headers into ordered pairs.

    Keys are stripped of surrounding whitespace and entries with an empty
    key are dropped. Duplicates are kept; order is preserved.
    """
    if not headers:
        return ()

    if isinstance(headers, Mapping):
        items = headers.items()
    else:
        items = ((pair.key, pair.value) for pair in headers)

    pairs = []
    for key, value in items:
        key = key.strip()
        if not key:
            continue
        pairs.append(HeaderPair(key=key, value=value))
    return tuple(pairs)


def header_mapping(pairs: Iterable[HeaderPair]) -> dict[str, str]:
    """Fold pairs into a mapping; later duplicates overwrite earlier ones."""
    return {pair.key: pair.value for pair in pairs}


def has_header(pairs: Iterable[HeaderPair], name: str) -> bool:
    """Case-insensitive check for a header name."""
    name = name.lower()
    return any(pair.key.lower() == name for pair in pairs)


def _is_blocked_host(host: str) -> bool:
    if host.lower() in _LOCAL_HOSTNAMES:
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        # Hostnames are not resolved here
        return False
    return (
        address.is_loopback
        or address.is_private
        or address.is_link_local
        or address.is_reserved
        or address.is_unspecified
        or address.is_multicast
    )


def validate_url(url: str) -> str:
    """
    Check that url is an absolute http(s) URI with a host.

    Returns:
        The stripped URL

    Raises:
        ValidationError: If the URL is malformed, relative, uses another
            scheme, or targets a blocked host
    """
    url = (url or "").strip()
    if not url:
        raise ValidationError("URL is required")

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValidationError(f"Invalid URL: {e}")

    if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.host:
        raise ValidationError(f"Invalid URL: {url!r} is not an absolute http(s) URL")

    if config.BLOCK_PRIVATE_NETWORKS and _is_blocked_host(parsed.host):
        raise ValidationError(f"Requests to {parsed.host} are not allowed")

    return url


def _body_to_text(body: Any) -> str | None:
    if body is None:
        return None
    if isinstance(body, str):
        return body
    return json.dumps(body)


def normalize_request(descriptor: RequestDescriptor) -> PreparedRequest:
    """
    Validate and canonicalize a request descriptor.

    Rules:
        - the URL must be an absolute http(s) URI
        - non-GET requests without a Content-Type header get
          Content-Type: application/json appended
        - GET requests never carry a body
        - non-GET bodies larger than MAX_REQUEST_BODY_BYTES are rejected

    Args:
        descriptor: The request as submitted by the client

    Returns:
        PreparedRequest ready for the executor

    Raises:
        ValidationError: If any rule above rejects the request
    """
    url = validate_url(descriptor.url)
    method = descriptor.method
    pairs = to_header_pairs(descriptor.headers)

    for pair in pairs:
        if not (pair.key.isascii() and pair.value.isascii()):
            raise ValidationError(f"Header {pair.key!r} contains non-ASCII characters")

    if method == "GET":
        body = None
    else:
        if not has_header(pairs, CONTENT_TYPE_HEADER):
            pairs = pairs + (HeaderPair(key=CONTENT_TYPE_HEADER, value=DEFAULT_CONTENT_TYPE),)
        body = _body_to_text(descriptor.body) or None
        if body is not None and len(body.encode("utf-8")) > config.MAX_REQUEST_BODY_BYTES:
            raise ValidationError(
                f"Request body exceeds the limit of {config.MAX_REQUEST_BODY_BYTES} bytes"
            )

    return PreparedRequest(method=method, url=url, headers=pairs, body=body)
