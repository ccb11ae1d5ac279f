"""Short identifier generation and custom alias sanitizing."""

import random
import re
import string
import uuid
from typing import Optional


class ShortCodeGenerator:
    """Generate short identifiers for links."""

    # Base62 characters (alphanumeric, case-sensitive)
    BASE62_CHARS = string.ascii_letters + string.digits  # a-zA-Z0-9

    MAX_ALIAS_LENGTH = 20

    def __init__(self, default_length: int = 5):
        """Initialize short code generator.

        Args:
            default_length: Default length for generated identifiers
        """
        if default_length < 1:
            raise ValueError("default_length must be positive")
        self.default_length = default_length

    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random identifier.

        Args:
            length: Length of the identifier (uses default if not specified)

        Returns:
            Random identifier
        """
        length = length or self.default_length
        return ''.join(random.choices(self.BASE62_CHARS, k=length))

    def generate_from_uuid(self, length: Optional[int] = None) -> str:
        """Generate an identifier from a UUID.

        Args:
            length: Length of the identifier (uses default if not specified)

        Returns:
            Identifier based on a fresh UUID
        """
        length = length or self.default_length
        code = self._int_to_base62(uuid.uuid4().int)
        return code[:length]

    def _int_to_base62(self, num: int) -> str:
        """Convert integer to base62 string."""
        if num == 0:
            return self.BASE62_CHARS[0]

        result = []
        base = len(self.BASE62_CHARS)

        while num > 0:
            num, remainder = divmod(num, base)
            result.append(self.BASE62_CHARS[remainder])

        return ''.join(reversed(result))

    @classmethod
    def sanitize_alias(cls, alias: str) -> str:
        """Turn user-supplied text into an identifier.

        Lowercases, collapses whitespace runs into a hyphen, drops anything
        outside [a-z0-9-] and truncates to MAX_ALIAS_LENGTH characters.

        Args:
            alias: Raw alias text

        Returns:
            Sanitized alias (may be empty)
        """
        code = alias.strip().lower()
        code = re.sub(r"\s+", "-", code)
        code = re.sub(r"[^a-z0-9-]", "", code)
        return code[:cls.MAX_ALIAS_LENGTH]
