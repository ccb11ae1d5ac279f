"""Data models for the link registry."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision and a Z suffix."""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing Z."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class LinkRecord:
    """A short link as persisted in the store."""

    id: str
    original_url: str
    short_url: str
    created_at: datetime
    expires_at: datetime
    clicks: int = 0
    custom_name: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to the persisted JSON shape."""
        data = {
            "id": self.id,
            "originalUrl": self.original_url,
            "shortUrl": self.short_url,
            "clicks": self.clicks,
            "createdAt": format_timestamp(self.created_at),
            "expiresAt": format_timestamp(self.expires_at),
        }
        if self.custom_name:
            data["customName"] = self.custom_name
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "LinkRecord":
        """Create from the persisted JSON shape.

        Raises:
            KeyError, TypeError, ValueError: If the entry is malformed
        """
        clicks = data.get("clicks", 0)
        if not isinstance(clicks, int) or isinstance(clicks, bool) or clicks < 0:
            raise ValueError(f"Invalid click count: {clicks!r}")

        return cls(
            id=str(data["id"]),
            original_url=str(data["originalUrl"]),
            short_url=str(data["shortUrl"]),
            clicks=clicks,
            created_at=parse_timestamp(data["createdAt"]),
            expires_at=parse_timestamp(data["expiresAt"]),
            custom_name=data.get("customName") or None,
        )
