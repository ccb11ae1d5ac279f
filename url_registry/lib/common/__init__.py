"""Common utilities for the link registry."""

from .validators import is_valid_url, normalize_url, is_reserved_word
from .url_builder import build_short_url, extract_short_id, request_base_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "normalize_url",
    "is_reserved_word",
    "build_short_url",
    "extract_short_id",
    "request_base_url",
    "setup_logging",
    "get_logger",
]
