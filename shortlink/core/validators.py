"""
Input Validators and Sanitizers

This module provides validation and sanitization functions for user inputs.
These functions help prevent security issues and ensure data integrity.

Security Considerations:
- Input validation prevents injection attacks
- Only http/https destinations are accepted (no javascript:, data:, file:)
- Length limits prevent DoS attacks
"""

import re
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urlparse

MAX_URL_LENGTH = 2048
MAX_SHORT_CODE_LENGTH = 32
MIN_CUSTOM_CODE_LENGTH = 3

# Generated codes are base62; custom codes may also use '-' and '_'
SHORT_CODE_PATTERN = re.compile(r'^[0-9A-Za-z_-]+$')


def sanitize_short_code(short_code: str) -> Optional[str]:
    """
    Sanitize and validate the short code taken from a request path.

    Args:
        short_code: The short code to sanitize

    Returns:
        Sanitized short code if valid, None otherwise

    Security:
    - Only allows URL-safe characters
    - Prevents path traversal attacks
    """
    if not short_code or not isinstance(short_code, str):
        return None

    short_code = short_code.strip()

    if len(short_code) > MAX_SHORT_CODE_LENGTH:
        return None

    if not SHORT_CODE_PATTERN.match(short_code):
        return None

    return short_code


def is_valid_custom_code(code: str) -> bool:
    """Check a user-requested short code: 3-32 chars of [0-9A-Za-z_-]."""
    if not isinstance(code, str):
        return False
    if not MIN_CUSTOM_CODE_LENGTH <= len(code) <= MAX_SHORT_CODE_LENGTH:
        return False
    return bool(SHORT_CODE_PATTERN.match(code))


def validate_url_length(url: str, max_length: int = MAX_URL_LENGTH) -> bool:
    """
    Validate URL length to prevent DoS attacks.

    Args:
        url: The URL to validate
        max_length: Maximum allowed length (default: 2048 per RFC 7230)

    Returns:
        True if URL length is valid, False otherwise
    """
    return bool(url) and len(url) <= max_length


def is_valid_url(url: str) -> bool:
    """
    Validate a destination URL.

    The URL must be absolute, use http/https and name a host. Hosts other
    than localhost must contain a dot.

    Args:
        url: The URL string to validate

    Returns:
        True if valid and safe, False otherwise
    """
    if not url or not isinstance(url, str):
        return False

    if not validate_url_length(url):
        return False

    if url != url.strip() or any(ch.isspace() for ch in url):
        return False

    try:
        result = urlparse(url)
        # Accessing .port raises ValueError for a malformed port
        result.port
    except ValueError:
        return False

    if result.scheme.lower() not in {'http', 'https'}:
        return False

    host = result.hostname
    if not host:
        return False

    if host != 'localhost' and '.' not in host:
        return False

    return True


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalise a datetime to naive UTC, the form timestamps are stored in."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def normalize_email(email: str) -> Optional[str]:
    """Case-fold an email address; None if it does not look like one."""
    if not email or not isinstance(email, str):
        return None
    email = email.strip().lower()
    if len(email) > 254 or not re.match(r'^[^@\s]+@[^@\s]+\.[^@\s]+$', email):
        return None
    return email
