"""
Input Validators and Sanitizers

This module provides validation and normalization for original URLs and
short codes received from callers.

Security Considerations:
- Only http/https destinations are accepted; other explicit schemes
  (javascript:, data:, file:, ftp://) are rejected
- Length limits prevent DoS attacks
- Short codes are checked against the generator alphabet before any lookup
"""

import re
from typing import Optional
from urllib.parse import urlsplit

from shortlink.core.exceptions import InvalidURLError

ALLOWED_SCHEMES = ("http://", "https://")

# Anything that looks like "scheme:" at the start of the string
_EXPLICIT_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")
_HOSTNAME = re.compile(r"^[\w.\-]+$")


def has_protocol(url: str) -> bool:
    return url.lower().startswith(ALLOWED_SCHEMES)


def normalize_candidate(url: str, default_protocol: str = "https") -> str:
    """
    Build the candidate used for syntactic validation.

    URLs without http:// or https:// get the default protocol prefixed.
    The caller's value is not modified; the candidate is only parsed.
    """
    if has_protocol(url):
        return url
    return f"{default_protocol}://{url}"


def _has_foreign_scheme(url: str) -> bool:
    if has_protocol(url):
        return False
    match = _EXPLICIT_SCHEME.match(url)
    if not match:
        return False
    # "localhost:8080/path" and "example.com:443" are host:port, not a scheme
    rest = url[match.end():]
    return rest.startswith("//") or not rest[:1].isdigit()


def is_valid_url(url: str, max_length: int = 2048, default_protocol: str = "https") -> bool:
    """
    Validate an original URL.

    Args:
        url: The URL string to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)
        default_protocol: Protocol assumed when the URL carries none

    Returns:
        True if the URL (or its protocol-prefixed candidate) parses as an
        absolute http(s) URL with a host, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    url = url.strip()
    if not url or len(url) > max_length:
        return False

    # urlsplit drops tabs and line breaks silently; a space only fails once it sits in the host
    if any(ch.isspace() and ch != " " for ch in url):
        return False

    if _has_foreign_scheme(url):
        return False

    try:
        parts = urlsplit(normalize_candidate(url, default_protocol))
        # Accessing .port raises ValueError for non-numeric or out of range ports
        parts.port
    except ValueError:
        return False

    if parts.scheme.lower() not in ("http", "https"):
        return False

    hostname = parts.hostname
    if not hostname:
        return False

    # IPv6 literals come back without brackets and contain colons
    if ":" in hostname:
        return True

    return bool(_HOSTNAME.match(hostname)) and not hostname.startswith(".")


def validate_original_url(
    url: str,
    max_length: int = 2048,
    default_protocol: str = "https"
) -> str:
    """
    Validate an original URL and return the value to store.

    The stored value keeps what the caller supplied (surrounding whitespace
    stripped); the protocol is added back at resolution time.

    Raises:
        InvalidURLError: If the URL is empty or does not parse
    """
    if not url or not url.strip():
        raise InvalidURLError(url or "", reason="URL must not be empty")

    if not is_valid_url(url, max_length=max_length, default_protocol=default_protocol):
        raise InvalidURLError(
            url,
            reason="Invalid URL format. URL must be an absolute http(s) URL with a valid host"
        )
    return url.strip()


def ensure_protocol(url: str, default_protocol: str = "https") -> str:
    """Prefix the default protocol to stored URLs that carry none."""
    if has_protocol(url):
        return url
    return f"{default_protocol}://{url}"


def sanitize_short_code(short_code: str, alphabet: str, max_length: int = 32) -> Optional[str]:
    """
    Sanitize and validate short code format.

    Args:
        short_code: The short code taken from the request path
        alphabet: Characters a generated code may contain
        max_length: Upper bound on accepted code length

    Returns:
        Sanitized short code if valid, None otherwise
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if not short_code or len(short_code) > max_length:
        return None

    allowed = set(alphabet)
    if any(ch not in allowed for ch in short_code):
        return None

    return short_code
