"""In-memory link store."""

from typing import Dict, Optional

from .base import LinkStoreBase


class MemoryLinkStore(LinkStoreBase):
    """Keeps values in a dict. Used for tests and throwaway runs."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    async def read(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def write(self, key: str, value: str) -> None:
        self.data[key] = value
