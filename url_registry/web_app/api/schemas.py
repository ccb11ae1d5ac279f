"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from ...lib.storage.models import LinkRecord


class ShortenRequest(BaseModel):
    """Request to shorten a URL."""

    url: str = Field(..., description="The URL to shorten; https:// is assumed when no scheme is given", min_length=1, max_length=2048)
    custom_alias: Optional[str] = Field(None, description="Optional custom alias", max_length=100)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                    "custom_alias": None
                },
                {
                    "url": "github.com/user/repo",
                    "custom_alias": "My Repo"
                }
            ]
        }
    }


class LinkResponse(BaseModel):
    """A short link."""

    id: str = Field(..., description="The short identifier")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The normalized original URL")
    clicks: int = Field(..., description="Number of redirects served")
    created_at: datetime = Field(..., description="Creation timestamp")
    expires_at: datetime = Field(..., description="Expiry timestamp")
    expired: bool = Field(..., description="Whether the retention window has passed")
    custom_name: Optional[str] = Field(None, description="Alias text as submitted")

    @classmethod
    def from_record(cls, record: LinkRecord, expired: bool) -> "LinkResponse":
        """Build from a registry record."""
        return cls(
            id=record.id,
            short_url=record.short_url,
            original_url=record.original_url,
            clicks=record.clicks,
            created_at=record.created_at,
            expires_at=record.expires_at,
            expired=expired,
            custom_name=record.custom_name,
        )


class LinkListResponse(BaseModel):
    """List of short links."""

    count: int
    links: List[LinkResponse]


class SweepResponse(BaseModel):
    """Result of an expiry sweep."""

    removed: int = Field(..., description="Number of expired links removed")


class StatisticsResponse(BaseModel):
    """Statistics response."""

    total_links: int
    active_links: int
    expired_links: int
    total_clicks: int
    top_links: List[LinkResponse]


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""

    detail: str = Field(..., description="Error message")
