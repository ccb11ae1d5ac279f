"""JSON file link store."""

import asyncio
import logging
import os
import re
import tempfile
from typing import Optional

from .base import LinkStoreBase
from ..errors import PersistenceError


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class JSONFileLinkStore(LinkStoreBase):
    """Stores each key as a file in a directory.

    Writes go through a temporary file and os.replace so readers never see a
    partially written value.
    """

    def __init__(self, directory: str, logger: Optional[logging.Logger] = None):
        """Initialize file store.

        Args:
            directory: Directory holding one file per key (created on first write)
            logger: Optional logger instance
        """
        self.directory = os.path.abspath(os.path.expanduser(directory))
        self.logger = logger or logging.getLogger(__name__)

    def _path_for(self, key: str) -> str:
        if not _KEY_PATTERN.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return os.path.join(self.directory, f"{key}.json")

    def _read_sync(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def _write_sync(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            os.makedirs(self.directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to save link data to {path}: {e}") from e

    async def read(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read_sync, key)

    async def write(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write_sync, key, value)
        self.logger.debug(f"Wrote {len(value)} bytes to {self._path_for(key)}")

    async def health_check(self) -> bool:
        """Healthy if the directory exists and is writable, or can be created."""
        if os.path.isdir(self.directory):
            return os.access(self.directory, os.W_OK)
        parent = os.path.dirname(self.directory)
        return os.path.isdir(parent) and os.access(parent, os.W_OK)
