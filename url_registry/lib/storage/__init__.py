"""Storage layer for the link registry."""

from .base import LinkStoreBase
from .memory import MemoryLinkStore
from .json_file import JSONFileLinkStore
from .redis_store import RedisLinkStore
from .models import LinkRecord

__all__ = [
    "LinkStoreBase",
    "MemoryLinkStore",
    "JSONFileLinkStore",
    "RedisLinkStore",
    "LinkRecord",
]
