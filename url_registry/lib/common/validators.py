"""Validation utilities for the link registry."""

import re
from urllib.parse import urlparse
from typing import Tuple

from ..errors import InvalidUrl


MAX_URL_LENGTH = 2048

# Route segments the web app owns; an alias equal to one of these would be unreachable.
RESERVED_WORDS = frozenset({
    "api", "health", "admin", "static", "assets", "favicon",
    "robots", "sitemap", "docs", "redoc", "openapi", "stats", "create",
})

_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*://")


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)

        # Check if scheme is http or https
        if result.scheme not in ["http", "https"]:
            return False, "URL must use http or https protocol"

        # Check if a host exists
        if not result.hostname:
            return False, "URL must have a valid domain"

        # Accessing port validates it
        result.port

        return True, ""

    except ValueError as e:
        return False, f"Invalid URL format: {str(e)}"


def has_scheme(url: str) -> bool:
    """Check if the text starts with a URL scheme (e.g. 'ftp://')."""
    return bool(_SCHEME_PATTERN.match(url))


def normalize_url(url: str) -> str:
    """Normalize user input into an absolute http(s) URL.

    If the input is not a valid URL and carries no scheme, https:// is
    prepended and the result validated again.

    Args:
        url: Raw URL text

    Returns:
        Normalized URL

    Raises:
        InvalidUrl: If the URL cannot be normalized
    """
    if not isinstance(url, str):
        raise InvalidUrl("Invalid URL format: URL is required")

    candidate = url.strip()
    is_valid, error = is_valid_url(candidate)
    if is_valid:
        return candidate

    if candidate and not has_scheme(candidate):
        candidate = "https://" + candidate
        is_valid, error = is_valid_url(candidate)
        if is_valid:
            return candidate

    raise InvalidUrl(f"Invalid URL format: {error}")


def is_reserved_word(code: str) -> bool:
    """Check if an identifier collides with a route the web app owns."""
    return code.lower() in RESERVED_WORDS
