"""
Short Code Generation

Codes are drawn uniformly at random from the base62 alphabet [0-9a-zA-Z]
using the secrets module. A 6-character code has 62**6 (about 5.7e10)
possible values.

Generation makes no uniqueness promise: the link registry checks each
candidate against storage and retries on collision, and the unique index
on short_links.code has the final say.
"""

import secrets

BASE62_CHARS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
DEFAULT_CODE_LENGTH = 6


def generate_short_code(length: int = DEFAULT_CODE_LENGTH) -> str:
    """
    Generate a random base62 short code.

    Args:
        length: Number of characters (default: 6)

    Returns:
        Random code of exactly ``length`` characters

    Raises:
        ValueError: If length is not positive
    """
    if length < 1:
        raise ValueError(f"Short code length must be positive, got {length}")
    return "".join(secrets.choice(BASE62_CHARS) for _ in range(length))
