"""
Repository documents: the owner-facing description of a store's content.

A document is a plain mapping (or JSON text) validated with pydantic and
turned into a Repository in one step. dump_repository produces the same
shape back, so fixtures can be written, tweaked and reloaded.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

from boxy.exceptions import RepositoryDocumentError
from boxy.repo.models import Avu, DirectoryEntry, Entry, EntryType, FileEntry, Identity, Permission
from boxy.repo.store import Repository

LOG = logging.getLogger("repo.document")


class IdentityDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str
    zone: str

    def to_identity(self) -> Identity:
        return Identity(self.name, self.zone)


class GroupDoc(IdentityDoc):
    members: List[IdentityDoc] = []


class AclEntryDoc(IdentityDoc):
    permission: Permission


class AvuDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")

    value: str
    unit: str = ""


class EntryDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")

    type: Literal["normal-dir", "linked-dir", "file"]
    creator: IdentityDoc
    create_time: int = 0
    modify_time: int = 0
    acl: List[AclEntryDoc] = []
    avus: Dict[str, AvuDoc] = {}
    content: Optional[str] = None

    @model_validator(mode="after")
    def check_content_only_on_files(self) -> "EntryDoc":
        if self.type == EntryType.FILE:
            if self.content is None:
                self.content = ""
        elif self.content is not None:
            raise ValueError(f"a {self.type} entry cannot carry content")
        return self

    @field_validator("acl")
    @classmethod
    def check_unique_acl(cls, acl: List[AclEntryDoc]) -> List[AclEntryDoc]:
        identities = [(a.name, a.zone) for a in acl]
        if len(set(identities)) != len(identities):
            raise ValueError("an identity may appear only once in an ACL")
        return acl

    def to_entry(self) -> Entry:
        acl = {a.to_identity(): a.permission for a in self.acl}
        avus = {attr: Avu(a.value, a.unit) for attr, a in self.avus.items()}
        common = dict(
            creator=self.creator.to_identity(),
            create_time=self.create_time,
            modify_time=self.modify_time,
            acl=acl,
            avus=avus,
        )
        if self.type == EntryType.FILE:
            return FileEntry(content=self.content or "", **common)
        return DirectoryEntry(type=EntryType(self.type), **common)


class RepositoryDoc(BaseModel):
    model_config = ConfigDict(extra="forbid")

    users: List[IdentityDoc] = []
    groups: List[GroupDoc] = []
    entries: Dict[str, EntryDoc] = {}

    @field_validator("entries")
    @classmethod
    def check_paths_normalized(cls, entries: Dict[str, EntryDoc]) -> Dict[str, EntryDoc]:
        for path in entries:
            if not path.startswith("/"):
                raise ValueError(f"path must be absolute: {path!r}")
            if path != "/" and path.endswith("/"):
                raise ValueError(f"path must not end with a slash: {path!r}")
        return entries

    @model_validator(mode="after")
    def check_unique_groups(self) -> "RepositoryDoc":
        seen = set()
        for group in self.groups:
            key = (group.name, group.zone)
            if key in seen:
                raise ValueError(f"duplicate group {group.name}#{group.zone}")
            seen.add(key)
        return self

    def to_repository(self) -> Repository:
        groups = {g.to_identity(): frozenset(m.to_identity() for m in g.members) for g in self.groups}
        return Repository(
            users=frozenset(u.to_identity() for u in self.users),
            groups=groups,
            entries={path: e.to_entry() for path, e in self.entries.items()},
        )


def _validated(build) -> Repository:
    try:
        doc = build()
    except ValidationError as exc:
        raise RepositoryDocumentError(f"Invalid repository document: {exc}") from exc
    repo = doc.to_repository()
    LOG.debug(
        "Loaded repository with %d users, %d groups, %d entries",
        len(repo.users),
        len(repo.groups),
        len(repo.entries),
    )
    return repo


def load_repository(data: Mapping[str, Any]) -> Repository:
    """Build a Repository from a document mapping."""
    return _validated(lambda: RepositoryDoc.model_validate(data))


def loads_repository(text: str) -> Repository:
    """Build a Repository from a JSON document."""
    return _validated(lambda: RepositoryDoc.model_validate_json(text))


def _identity_dict(identity: Identity) -> dict[str, str]:
    return {"name": identity.name, "zone": identity.zone}


def dump_repository(repo: Repository) -> dict[str, Any]:
    """Render a Repository as a document mapping accepted by load_repository."""
    entries: dict[str, Any] = {}
    for path, entry in repo.entries.items():
        record: dict[str, Any] = {
            "type": str(entry.type),
            "creator": _identity_dict(entry.creator),
            "create_time": entry.create_time,
            "modify_time": entry.modify_time,
            "acl": [{**_identity_dict(who), "permission": str(perm)} for who, perm in entry.acl.items()],
            "avus": {attr: {"value": avu.value, "unit": avu.unit} for attr, avu in entry.avus.items()},
        }
        if isinstance(entry, FileEntry):
            record["content"] = entry.content
        entries[path] = record

    return {
        "users": [_identity_dict(u) for u in sorted(repo.users, key=lambda i: (i.zone, i.name))],
        "groups": [
            {
                **_identity_dict(group),
                "members": [_identity_dict(m) for m in sorted(members, key=lambda i: (i.zone, i.name))],
            }
            for group, members in repo.groups.items()
        ],
        "entries": entries,
    }
