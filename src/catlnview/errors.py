"""Exception taxonomy shared by the source, IR and CLI layers."""

from __future__ import annotations


class CatlnViewError(Exception):
    """Base class for every error raised by catlnview."""


class TransportError(CatlnViewError):
    """A document could not be fetched or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class MalformedDocument(CatlnViewError):
    """A document was fetched but does not have the expected structure."""


class PageTreeConflict(MalformedDocument):
    """A page name segment is used both as a page and as a directory."""


class UnknownRoute(CatlnViewError):
    """A route does not name any known view."""
