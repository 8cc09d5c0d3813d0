"""
Exception hierarchy for boxy.

Read queries over collections (ACLs, AVUs, members) never raise for a
missing path; they return empty results. Everything here is raised for
scalar lookups on absent entries and for updates aimed at the wrong target.
"""

from __future__ import annotations


class BoxyError(Exception):
    """Base exception for all boxy errors."""

    pass


class RepositoryError(BoxyError):
    """Base exception for repository store errors."""

    pass


class EntryNotFoundError(RepositoryError, KeyError):
    """No entry exists at the requested path."""

    def __init__(self, path: str) -> None:
        super().__init__(path)
        self.path = path

    def __str__(self) -> str:
        return f"{self.path} not found"


class InvalidTargetError(RepositoryError):
    """An update was aimed at a missing path or an entry of the wrong type."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class EntryExistsError(InvalidTargetError):
    """An entry already exists at the path being created."""

    def __init__(self, path: str) -> None:
        super().__init__(path, "entry already exists")


class RepositoryDocumentError(BoxyError, ValueError):
    """A repository document failed validation."""

    pass


class DataNotFoundError(BoxyError):
    """A user or other record is unknown to the repository."""

    pass
