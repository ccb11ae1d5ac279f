"""Build stores and registries from configuration."""

import logging
from typing import Optional

from .config import Config
from .lib.registry import LinkRegistry
from .lib.shortcode import ShortCodeGenerator
from .lib.storage import JSONFileLinkStore, LinkStoreBase, MemoryLinkStore, RedisLinkStore


def create_store(config: Config, logger: Optional[logging.Logger] = None) -> LinkStoreBase:
    """Create the link store selected by config.storage_backend."""
    if config.storage_backend == "memory":
        return MemoryLinkStore()

    if config.storage_backend == "redis":
        if not config.redis_url:
            raise ValueError("REDIS_URL is required for the redis storage backend")
        return RedisLinkStore(redis_url=config.redis_url, logger=logger)

    return JSONFileLinkStore(config.storage_dir, logger=logger)


def create_registry(
    config: Config,
    logger: Optional[logging.Logger] = None,
    store: Optional[LinkStoreBase] = None,
) -> LinkRegistry:
    """Create a link registry wired to the configured store."""
    return LinkRegistry(
        store=store or create_store(config, logger),
        base_url=config.base_url,
        path_prefix=config.path_prefix,
        short_code_generator=ShortCodeGenerator(default_length=config.short_id_length),
        logger=logger,
        enable_custom_aliases=config.enable_custom_aliases,
        max_collision_retries=config.max_collision_retries,
    )
