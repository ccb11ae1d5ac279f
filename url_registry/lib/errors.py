"""Exceptions raised by the link registry."""


class LinkRegistryError(Exception):
    """Base class for link registry errors."""


class InvalidUrl(LinkRegistryError, ValueError):
    """The submitted URL could not be normalized into a valid http(s) URL."""


class InvalidAlias(LinkRegistryError, ValueError):
    """The custom alias is empty after sanitizing, reserved, or not allowed."""


class AliasTaken(LinkRegistryError, ValueError):
    """The custom alias is already used by another link."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(
            f"Custom name '{alias}' is already in use. Please choose a different one."
        )


class PersistenceError(LinkRegistryError):
    """Reading from or writing to the link store failed."""


class LinkNotFound(LinkRegistryError):
    """No link exists for the requested short identifier."""

    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__("URL not found")


class LinkExpired(LinkRegistryError):
    """The link exists but its retention window has passed."""

    def __init__(self, link_id: str):
        self.link_id = link_id
        super().__init__("This link has expired")
