"""Link registry: creates, resolves, counts and expires short links."""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from .errors import (
    AliasTaken,
    InvalidAlias,
    LinkExpired,
    LinkNotFound,
    LinkRegistryError,
    PersistenceError,
)
from .shortcode import ShortCodeGenerator
from .storage.base import LinkStoreBase
from .storage.models import LinkRecord
from .common.validators import normalize_url, is_reserved_word
from .common.url_builder import build_short_url


STORAGE_KEY = "url_shortener_data"
RETENTION_PERIOD = timedelta(days=3)
TOP_LINKS_LIMIT = 5


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class LinkRegistry:
    """Owns the persisted collection of short links.

    Every mutating operation reads the whole collection, changes it and
    writes it back. There is no locking: two overlapping read-modify-write
    sequences can lose an update, and the last write wins.
    """

    def __init__(
        self,
        store: LinkStoreBase,
        base_url: str = "http://localhost:9200",
        path_prefix: str = "",
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        enable_custom_aliases: bool = True,
        max_collision_retries: int = 5,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize link registry.

        Args:
            store: Store holding the serialized collection
            base_url: Origin used to build short URLs
            path_prefix: Optional route prefix for short URLs (e.g. /r)
            short_code_generator: Optional short code generator
            logger: Optional logger
            enable_custom_aliases: Whether to allow custom aliases
            max_collision_retries: Maximum random re-rolls on collision
            clock: Returns the current time (timezone-aware)
        """
        self.store = store
        self.base_url = base_url
        self.path_prefix = path_prefix
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.enable_custom_aliases = enable_custom_aliases
        self.max_collision_retries = max_collision_retries
        self.clock = clock or utc_now

    async def _load(self) -> List[LinkRecord]:
        try:
            raw = await self.store.read(STORAGE_KEY)
        except UnicodeDecodeError as e:
            self.logger.warning(f"Ignoring undecodable link data: {e}")
            return []
        if not raw:
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return [LinkRecord.from_dict(item) for item in data]
        except (ValueError, KeyError, TypeError, AttributeError, RecursionError) as e:
            self.logger.warning(f"Ignoring malformed link data: {e}")
            return []

    async def _save(self, records: List[LinkRecord]) -> None:
        payload = json.dumps([record.to_dict() for record in records])
        try:
            await self.store.write(STORAGE_KEY, payload)
        except PersistenceError:
            self.logger.error("Error saving links to storage")
            raise

    async def create_link(
        self,
        original_url: str,
        custom_alias: Optional[str] = None,
        base_url: Optional[str] = None,
    ) -> LinkRecord:
        """Create a new short link.

        Args:
            original_url: The URL to shorten; https:// is assumed if no scheme is given
            custom_alias: Optional alias to use as the identifier
            base_url: Optional origin overriding the configured one

        Returns:
            The persisted record

        Raises:
            InvalidUrl: If the URL is malformed
            InvalidAlias: If the alias is unusable
            AliasTaken: If the alias is already in use
            PersistenceError: If the store write fails
        """
        original_url = normalize_url(original_url)

        records = await self._load()
        existing_ids = {record.id for record in records}

        custom_name = custom_alias.strip() if custom_alias else ""
        if custom_name:
            short_id = self._alias_to_id(custom_name)
            if short_id in existing_ids:
                raise AliasTaken(short_id)
        else:
            custom_name = None
            short_id = self._generate_unique_id(existing_ids)

        created_at = self.clock()
        record = LinkRecord(
            id=short_id,
            original_url=original_url,
            short_url=build_short_url(short_id, base_url or self.base_url, self.path_prefix),
            created_at=created_at,
            expires_at=created_at + RETENTION_PERIOD,
            clicks=0,
            custom_name=custom_name,
        )

        records.append(record)
        await self._save(records)

        self.logger.info(f"Created short link: {short_id} -> {original_url}")
        return record

    def _alias_to_id(self, alias: str) -> str:
        if not self.enable_custom_aliases:
            raise InvalidAlias("Custom names are not enabled")

        short_id = self.generator.sanitize_alias(alias)
        if not short_id:
            raise InvalidAlias("Custom name must contain letters, numbers or hyphens")
        if is_reserved_word(short_id):
            raise InvalidAlias(f"'{short_id}' is a reserved word and cannot be used")
        return short_id

    def _generate_unique_id(self, existing_ids: set) -> str:
        for attempt in range(self.max_collision_retries + 1):
            code = self.generator.generate_random()
            if code not in existing_ids:
                if attempt:
                    self.logger.debug(f"Generated id after {attempt + 1} attempts: {code}")
                return code

        # Last resort: longer UUID-based code
        code = self.generator.generate_from_uuid(length=self.generator.default_length + 3)
        if code not in existing_ids:
            return code

        raise LinkRegistryError("Unable to generate unique short id after multiple attempts")

    async def resolve(self, link_id: str) -> Optional[LinkRecord]:
        """Look up a link by identifier.

        Args:
            link_id: The short identifier

        Returns:
            The record, or None if not found
        """
        for record in await self._load():
            if record.id == link_id:
                self.logger.debug(f"Resolved {link_id} -> {record.original_url}")
                return record
        return None

    async def resolve_short_url(self, short_url: str) -> Optional[LinkRecord]:
        """Look up a link by its complete short URL."""
        for record in await self._load():
            if record.short_url == short_url:
                return record
        return None

    def is_expired(self, record: LinkRecord) -> bool:
        """Check whether a record's retention window has passed."""
        return self.clock() > record.expires_at

    async def increment_clicks(self, link_id: str) -> None:
        """Add one click to a link. Unknown identifiers are ignored.

        Args:
            link_id: The short identifier
        """
        records = await self._load()
        for record in records:
            if record.id == link_id:
                record.clicks += 1
                break
        else:
            self.logger.debug(f"Click for unknown link ignored: {link_id}")
            return

        await self._save(records)

    async def follow_link(self, link_id: str) -> LinkRecord:
        """Resolve a link for redirecting and count the click.

        Args:
            link_id: The short identifier

        Returns:
            The record with its updated click count

        Raises:
            LinkNotFound: If no link has this identifier
            LinkExpired: If the link's retention window has passed
        """
        record = await self.resolve(link_id)
        if record is None:
            self.logger.warning(f"Short link not found: {link_id}")
            raise LinkNotFound(link_id)

        if self.is_expired(record):
            self.logger.info(f"Short link expired: {link_id}")
            raise LinkExpired(link_id)

        await self.increment_clicks(link_id)
        record.clicks += 1
        return record

    async def list_links(self) -> List[LinkRecord]:
        """List all links in insertion order."""
        return await self._load()

    async def sweep_expired(self) -> int:
        """Remove every expired link.

        The collection is only rewritten when something was removed.

        Returns:
            Number of links removed
        """
        records = await self._load()
        remaining = [record for record in records if not self.is_expired(record)]

        removed = len(records) - len(remaining)
        if removed:
            await self._save(remaining)
            self.logger.info(f"Swept {removed} expired link(s)")
        return removed

    async def delete_link(self, link_id: str) -> bool:
        """Delete a link.

        Args:
            link_id: The short identifier

        Returns:
            True if a link was removed
        """
        records = await self._load()
        remaining = [record for record in records if record.id != link_id]
        await self._save(remaining)

        deleted = len(remaining) < len(records)
        if deleted:
            self.logger.info(f"Deleted short link: {link_id}")
        return deleted

    async def get_statistics(self) -> Dict[str, Any]:
        """Summarize the collection.

        Returns:
            Dictionary with total_links, active_links, expired_links,
            total_clicks and top_links (most clicked first)
        """
        records = await self._load()
        active = [record for record in records if not self.is_expired(record)]
        top_links = sorted(records, key=lambda record: record.clicks, reverse=True)

        return {
            "total_links": len(records),
            "active_links": len(active),
            "expired_links": len(records) - len(active),
            "total_clicks": sum(record.clicks for record in records),
            "top_links": top_links[:TOP_LINKS_LIMIT],
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check."""
        store_healthy = await self.store.health_check()
        return {
            "store": store_healthy,
            "overall": store_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
