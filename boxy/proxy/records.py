"""
Response records returned by the access objects.

These mirror the shapes a data-grid client expects (permission entries,
listing entries, metadata rows). They are pydantic models so callers can
dump them to JSON directly.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import List, Optional

from pydantic import BaseModel

from boxy.repo.models import EntryType, Permission


class FilePermission(StrEnum):
    """Permission as reported to clients; NONE means nothing was recorded."""

    NONE = "none"
    READ = "read"
    WRITE = "write"
    OWN = "own"

    @classmethod
    def from_permission(cls, perm: Optional[Permission]) -> "FilePermission":
        if perm is None:
            return cls.NONE
        return cls(str(perm))


class SpecColType(StrEnum):
    NORMAL = "normal"
    LINKED_COLL = "linked_coll"

    @classmethod
    def for_entry_type(cls, entry_type: EntryType) -> Optional["SpecColType"]:
        if entry_type is EntryType.NORMAL_DIR:
            return cls.NORMAL
        if entry_type is EntryType.LINKED_DIR:
            return cls.LINKED_COLL
        return None


class ObjectType(StrEnum):
    COLLECTION = "collection"
    DATA_OBJECT = "data_object"


class ObjStat(BaseModel):
    spec_col_type: Optional[SpecColType] = None


class UserFilePermission(BaseModel):
    user_name: str
    user_zone: str
    permission: FilePermission


class ListingEntry(BaseModel):
    parent_path: str
    path_or_name: str
    object_type: ObjectType
    spec_col_type: Optional[SpecColType] = None
    owner_name: str
    owner_zone: str
    created_at: datetime
    modified_at: datetime
    permissions: List[UserFilePermission] = []
    count: int
    last_result: bool


class MetadataRecord(BaseModel):
    domain: str = "data"
    domain_object_id: str
    domain_object_unique_name: str
    attribute: str
    value: str
    unit: str


class User(BaseModel):
    name: str
    zone: str


class UserGroup(BaseModel):
    user_group_name: str
    zone: str


class AvuData(BaseModel):
    """Metadata triple submitted by a client."""

    attribute: str
    value: str
    unit: str = ""
