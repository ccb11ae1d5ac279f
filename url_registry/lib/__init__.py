"""Core logic for the link registry."""

from .shortcode import ShortCodeGenerator
from .registry import LinkRegistry
from .errors import (
    LinkRegistryError,
    InvalidUrl,
    InvalidAlias,
    AliasTaken,
    PersistenceError,
    LinkNotFound,
    LinkExpired,
)

__all__ = [
    "ShortCodeGenerator",
    "LinkRegistry",
    "LinkRegistryError",
    "InvalidUrl",
    "InvalidAlias",
    "AliasTaken",
    "PersistenceError",
    "LinkNotFound",
    "LinkExpired",
]
