"""
In-memory mock repository store.

A Repository is an immutable value: the query methods read it, the update
methods (add_avu, add_file, write_to_file) return a new Repository that
shares every untouched entry with the old one. Holding and replacing the
current value is the caller's job (see boxy.proxy.ref.RepositoryRef).

Collection-valued queries treat a missing path as empty. Scalar queries on
a missing path raise EntryNotFoundError, except get_permission, which
returns None so "no recorded permission" is never confused with a level.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import AbstractSet, Mapping

from boxy.exceptions import EntryExistsError, EntryNotFoundError, InvalidTargetError
from boxy.paths import parent_path
from boxy.repo.models import Avu, Entry, EntryType, FileEntry, Identity, Permission, frozen_mapping

LOG = logging.getLogger("repo.store")

NO_CREATOR = Identity("", "")


@dataclass(frozen=True)
class Repository:
    """Users, group memberships and the path-keyed entry table."""

    users: AbstractSet[Identity] = field(default_factory=frozenset)
    groups: Mapping[Identity, AbstractSet[Identity]] = field(default_factory=dict)
    entries: Mapping[str, Entry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "users", frozenset(self.users))
        groups = {group: frozenset(members) for group, members in self.groups.items()}
        object.__setattr__(self, "groups", MappingProxyType(groups))
        object.__setattr__(self, "entries", frozen_mapping(self.entries))

    def __hash__(self) -> int:
        return hash((self.users, frozenset(self.groups.items()), tuple(self.entries.items())))

    def __contains__(self, path: object) -> bool:
        return path in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def contains_entry(self, path: str) -> bool:
        return path in self.entries

    def get_entry(self, path: str) -> Entry:
        try:
            return self.entries[path]
        except KeyError:
            raise EntryNotFoundError(path) from None

    def get_type(self, path: str) -> EntryType:
        return self.get_entry(path).type

    def is_directory(self, path: str) -> bool:
        entry = self.entries.get(path)
        return entry is not None and entry.type.is_directory

    def is_file(self, path: str) -> bool:
        return isinstance(self.entries.get(path), FileEntry)

    def get_acl(self, path: str) -> dict[Identity, Permission]:
        entry = self.entries.get(path)
        return dict(entry.acl) if entry is not None else {}

    def get_avus(self, path: str) -> list[tuple[str, str, str]]:
        """Return (attribute, value, unit) triples; empty if the path is absent."""
        entry = self.entries.get(path)
        if entry is None:
            return []
        return [(attr, avu.value, avu.unit) for attr, avu in entry.avus.items()]

    def get_create_time(self, path: str) -> int:
        return self.get_entry(path).create_time

    def get_modify_time(self, path: str) -> int:
        return self.get_entry(path).modify_time

    def get_creator(self, path: str) -> Identity:
        return self.get_entry(path).creator

    def get_content(self, path: str) -> str:
        entry = self.get_entry(path)
        if not isinstance(entry, FileEntry):
            raise InvalidTargetError(path, f"{entry.type} has no content")
        return entry.content

    def get_members(self, path: str) -> list[str]:
        """Paths of the immediate children of ``path``, in insertion order."""
        return [p for p in self.entries if p != path and parent_path(p) == path]

    def get_permission(self, path: str, username: str, zone: str) -> Permission | None:
        """
        Look up the ACL level recorded for (username, zone) on ``path``.

        Returns None when the entry is absent or has no ACL entry for the
        identity. Group membership is not consulted.
        """
        entry = self.entries.get(path)
        if entry is None:
            return None
        return entry.acl.get(Identity(username, zone))

    def get_user_groups(self, username: str, zone: str) -> list[Identity]:
        user = Identity(username, zone)
        return [group for group, members in self.groups.items() if user in members]

    def user_exists(self, username: str, zone: str) -> bool:
        return Identity(username, zone) in self.users

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def _with_entry(self, path: str, entry: Entry) -> Repository:
        entries = dict(self.entries)
        entries[path] = entry
        return replace(self, entries=entries)

    def _next_timestamp(self) -> int:
        if not self.entries:
            return 0
        return 1 + max(max(e.create_time, e.modify_time) for e in self.entries.values())

    def add_avu(self, path: str, attribute: str, value: str, unit: str) -> Repository:
        """Set ``attribute`` to (value, unit) on the entry, replacing any prior pair."""
        entry = self.entries.get(path)
        if entry is None:
            raise InvalidTargetError(path, "cannot add metadata to a missing entry")

        avus = dict(entry.avus)
        avus[attribute] = Avu(value, unit)
        LOG.debug("Set AVU %s=(%r, %r) on %s", attribute, value, unit, path)
        return self._with_entry(path, replace(entry, avus=avus))

    def add_file(
        self,
        path: str,
        creator: Identity | None = None,
        timestamp: int | None = None,
    ) -> Repository:
        """
        Create an empty file at ``path``.

        Args:
            path: Normalized absolute path of the new file
            creator: Owner identity; defaults to the parent directory's creator
            timestamp: Create/modify time; defaults to the next logical tick

        Raises:
            EntryExistsError: Something already lives at ``path``
        """
        if path in self.entries:
            raise EntryExistsError(path)

        if creator is None:
            parent = self.entries.get(parent_path(path))
            creator = parent.creator if parent is not None else NO_CREATOR
        if timestamp is None:
            timestamp = self._next_timestamp()

        LOG.debug("Adding file %s for %s#%s at t=%d", path, creator.name, creator.zone, timestamp)
        return self._with_entry(
            path,
            FileEntry(creator=creator, create_time=timestamp, modify_time=timestamp),
        )

    def write_to_file(self, path: str, data: str, offset: int) -> Repository:
        """
        Overwrite the file's content starting at ``offset``.

        Characters past the end of the written window are kept. Writing beyond
        the current end pads the gap with spaces rather than NULs.

        Raises:
            InvalidTargetError: ``path`` is missing or not a file
            ValueError: ``offset`` is negative
        """
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")

        entry = self.entries.get(path)
        if not isinstance(entry, FileEntry):
            reason = "no such file" if entry is None else f"cannot write to a {entry.type}"
            raise InvalidTargetError(path, reason)

        content = entry.content
        if offset <= len(content):
            content = content[:offset] + data + content[offset + len(data) :]
        else:
            content = content + " " * (offset - len(content)) + data

        LOG.debug("Wrote %d chars to %s at offset %d", len(data), path, offset)
        return self._with_entry(path, replace(entry, content=content))
