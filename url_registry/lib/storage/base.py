"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional


class LinkStoreBase(ABC):
    """Single-collection key-value store the registry persists into.

    Values are opaque strings; the registry owns encoding and decoding.
    """

    @abstractmethod
    async def read(self, key: str) -> Optional[str]:
        """Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if nothing is stored

        Raises:
            PersistenceError: If the store cannot be read
            UnicodeDecodeError: If the stored bytes are not valid UTF-8
        """
        pass

    @abstractmethod
    async def write(self, key: str, value: str) -> None:
        """Replace the value stored under a key.

        Args:
            key: Storage key
            value: Serialized value

        Raises:
            PersistenceError: If the value could not be written
        """
        pass

    async def health_check(self) -> bool:
        """Check if the store is usable.

        Returns:
            True if healthy, False otherwise
        """
        return True

    async def close(self) -> None:
        """Release store resources."""
        pass
