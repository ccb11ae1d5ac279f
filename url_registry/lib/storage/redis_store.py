"""Redis link store."""

import logging
from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from .base import LinkStoreBase
from ..errors import PersistenceError


class RedisLinkStore(LinkStoreBase):
    """Keeps each key as a Redis string under a namespace."""

    def __init__(
        self,
        redis_url: Optional[str] = None,
        namespace: str = "url:registry",
        client: Optional[redis.Redis] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Args:
            redis_url: Redis connection URL (e.g., redis://localhost:6379/0)
            namespace: Prefix for Redis keys
            client: Optional pre-built client (takes precedence over redis_url)
            logger: Optional logger instance
        """
        if client is None and not redis_url:
            raise ValueError("Either redis_url or client is required")

        self.redis_url = redis_url
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self.client: Optional[redis.Redis] = client

    def _get_client(self) -> redis.Redis:
        if self.client is None:
            self.client = redis.from_url(
                self.redis_url,
                encoding="utf-8",
                decode_responses=True,
            )
            self.logger.info("Redis link store enabled")
        return self.client

    def get_redis_key(self, key: str) -> str:
        """Build the namespaced Redis key.

        Args:
            key: Storage key

        Returns:
            Redis key
        """
        return f"{self.namespace}:{key}"

    async def read(self, key: str) -> Optional[str]:
        try:
            value = await self._get_client().get(self.get_redis_key(key))
        except RedisError as e:
            self.logger.error(f"Redis read error: {e}")
            raise PersistenceError(f"Failed to read link data: {e}") from e

        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def write(self, key: str, value: str) -> None:
        try:
            await self._get_client().set(self.get_redis_key(key), value)
        except RedisError as e:
            self.logger.error(f"Redis write error: {e}")
            raise PersistenceError(f"Failed to save link data: {e}") from e

    async def health_check(self) -> bool:
        try:
            return bool(await self._get_client().ping())
        except RedisError as e:
            self.logger.error(f"Redis health check failed: {e}")
            return False

    async def close(self) -> None:
        """Close Redis connection."""
        if self.client is not None:
            await self.client.aclose()
            self.client = None
            self.logger.info("Redis connection closed")
