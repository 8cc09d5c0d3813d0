"""
Value types for the mock repository.

Entries are a tagged union: directories (normal or linked) carry no
content, files carry their content as 8-bit text. All types are frozen and
their mappings are read-only copies; the store replaces values rather than
mutating them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping, Union


class EntryType(StrEnum):
    """Kind of node in the path hierarchy."""

    NORMAL_DIR = "normal-dir"
    LINKED_DIR = "linked-dir"
    FILE = "file"

    @property
    def is_directory(self) -> bool:
        return self is not EntryType.FILE


class Permission(StrEnum):
    """Access level recorded in an ACL: read < write < own."""

    READ = "read"
    WRITE = "write"
    OWN = "own"


@dataclass(frozen=True)
class Identity:
    """A (name, zone) pair naming a user or a group."""

    name: str
    zone: str

    def __iter__(self):
        yield self.name
        yield self.zone


@dataclass(frozen=True)
class Avu:
    """Value and unit of an attribute; an empty unit is still a unit."""

    value: str
    unit: str = ""


def frozen_mapping(mapping: Mapping) -> Mapping:
    """Read-only copy of ``mapping``; later changes to the source don't leak in."""
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class DirectoryEntry:
    """A collection. Linked directories list like normal ones."""

    creator: Identity
    create_time: int
    modify_time: int
    acl: Mapping[Identity, Permission] = field(default_factory=dict)
    avus: Mapping[str, Avu] = field(default_factory=dict)
    type: EntryType = EntryType.NORMAL_DIR

    def __post_init__(self) -> None:
        entry_type = EntryType(self.type)
        if not entry_type.is_directory:
            raise ValueError(f"DirectoryEntry cannot have type {entry_type!r}")
        object.__setattr__(self, "type", entry_type)
        object.__setattr__(self, "acl", frozen_mapping(self.acl))
        object.__setattr__(self, "avus", frozen_mapping(self.avus))

    def __hash__(self) -> int:
        return hash(
            (
                self.type,
                self.creator,
                self.create_time,
                self.modify_time,
                frozenset(self.acl.items()),
                frozenset(self.avus.items()),
            )
        )


@dataclass(frozen=True)
class FileEntry:
    """A data object holding text content."""

    creator: Identity
    create_time: int
    modify_time: int
    acl: Mapping[Identity, Permission] = field(default_factory=dict)
    avus: Mapping[str, Avu] = field(default_factory=dict)
    content: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "acl", frozen_mapping(self.acl))
        object.__setattr__(self, "avus", frozen_mapping(self.avus))

    def __hash__(self) -> int:
        return hash(
            (
                self.creator,
                self.create_time,
                self.modify_time,
                frozenset(self.acl.items()),
                frozenset(self.avus.items()),
                self.content,
            )
        )

    @property
    def type(self) -> EntryType:
        return EntryType.FILE


Entry = Union[DirectoryEntry, FileEntry]
