"""
Access objects backed by a shared RepositoryRef.

Each accessor is bound to the reference and the connected account. They
normalize incoming paths, call the repository's query/update operations,
and translate results into the records in boxy.proxy.records. None of them
enforce the ACLs they report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, AbstractSet

from boxy.exceptions import DataNotFoundError, EntryNotFoundError
from boxy.paths import basename, dirname, rm_last_slash
from boxy.proxy.records import (
    AvuData,
    FilePermission,
    ListingEntry,
    MetadataRecord,
    ObjectType,
    SpecColType,
    User,
    UserFilePermission,
    UserGroup,
)
from boxy.proxy.ref import RepositoryRef
from boxy.repo.models import EntryType
from boxy.repo.store import Repository

if TYPE_CHECKING:
    from boxy.proxy.files import MockFile

LOG = logging.getLogger("proxy.access")

DEFAULT_PAGE_SIZE = 5

COLLECTION_TYPES = frozenset({EntryType.NORMAL_DIR, EntryType.LINKED_DIR})
DATA_OBJECT_TYPES = frozenset({EntryType.FILE})


@dataclass(frozen=True)
class Account:
    """The connected user."""

    username: str
    zone: str


def acl_records(repo: Repository, path: str) -> list[UserFilePermission]:
    return [
        UserFilePermission(
            user_name=who.name,
            user_zone=who.zone,
            permission=FilePermission.from_permission(perm),
        )
        for who, perm in repo.get_acl(path).items()
    ]


def _timestamp(ticks: int) -> datetime:
    # Logical times are reported as milliseconds since the epoch.
    return datetime.fromtimestamp(ticks / 1000, tz=timezone.utc)


def listing_entry(repo: Repository, path: str, page_idx: int, last: bool) -> ListingEntry:
    entry_type = repo.get_type(path)
    creator = repo.get_creator(path)
    is_file = entry_type is EntryType.FILE
    return ListingEntry(
        parent_path=dirname(path),
        path_or_name=basename(path) if is_file else path,
        object_type=ObjectType.DATA_OBJECT if is_file else ObjectType.COLLECTION,
        spec_col_type=SpecColType.for_entry_type(entry_type),
        owner_name=creator.name,
        owner_zone=creator.zone,
        created_at=_timestamp(repo.get_create_time(path)),
        modified_at=_timestamp(repo.get_modify_time(path)),
        permissions=acl_records(repo, path),
        count=page_idx + 1,
        last_result=last,
    )


def member_page(
    repo: Repository,
    parent: str,
    types: AbstractSet[EntryType],
    start_index: int,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> list[ListingEntry]:
    """
    One page of the members of ``parent`` whose type is in ``types``.

    The final record of the final page has ``last_result`` set. A negative
    ``start_index`` counts as 0.
    """
    start_index = max(start_index, 0)
    paths = [p for p in repo.get_members(parent) if repo.get_type(p) in types]
    page = paths[start_index : start_index + page_size]
    last_page = len(paths) <= start_index + page_size
    return [
        listing_entry(repo, p, idx, last_page and idx == len(page) - 1)
        for idx, p in enumerate(page)
    ]


class _Accessor:
    def __init__(self, ref: RepositoryRef, account: Account) -> None:
        self.ref = ref
        self.account = account


class MockFileSystemAccess(_Accessor):
    def __init__(self, ref: RepositoryRef, account: Account, out_of_memory: bool = False) -> None:
        super().__init__(ref, account)
        self.out_of_memory = out_of_memory

    def get_list_in_dir(self, file: "MockFile") -> list[str]:
        """Names in the directory, or in a file's parent directory."""
        if self.out_of_memory:
            raise MemoryError("mock file system is out of memory")
        if not file.exists():
            raise EntryNotFoundError(file.get_absolute_path())

        target = file.get_absolute_path() if file.is_directory() else file.get_parent()
        return [basename(p) for p in self.ref.value.get_members(target)]


class MockEntryListAccess(_Accessor):
    """Lists collections and data objects in pages of at most ``page_size``."""

    def __init__(self, ref: RepositoryRef, account: Account, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        super().__init__(ref, account)
        self.page_size = page_size

    def get_entry_at_path(self, path: str) -> ListingEntry:
        repo = self.ref.value
        if not repo.contains_entry(path):
            raise EntryNotFoundError(path)
        return listing_entry(repo, path, 0, True)

    def list_collections_under_path(self, path: str, start_index: int = 0) -> list[ListingEntry]:
        return member_page(self.ref.value, path, COLLECTION_TYPES, start_index, self.page_size)

    def list_data_objects_under_path(self, path: str, start_index: int = 0) -> list[ListingEntry]:
        return member_page(self.ref.value, path, DATA_OBJECT_TYPES, start_index, self.page_size)


class MockCollectionAccess(_Accessor):
    def get_permission_for_collection(self, path: str, username: str, zone: str) -> FilePermission:
        perm = self.ref.value.get_permission(rm_last_slash(path), username, zone)
        return FilePermission.from_permission(perm)

    def list_permissions_for_collection(self, path: str) -> list[UserFilePermission]:
        repo = self.ref.value
        if path.endswith("/") or not repo.is_directory(path):
            raise EntryNotFoundError(path)
        return acl_records(repo, path)


class MockDataObjectAccess(_Accessor):
    def add_avu_metadata(self, path: str, avu: AvuData) -> None:
        self.ref.update(Repository.add_avu, rm_last_slash(path), avu.attribute, avu.value, avu.unit)

    def find_metadata_values_for_data_object(self, path: str) -> list[MetadataRecord]:
        # The path doubles as the domain object's id and unique name.
        path = rm_last_slash(path)
        return [
            MetadataRecord(
                domain_object_id=path,
                domain_object_unique_name=path,
                attribute=attr,
                value=value,
                unit=unit,
            )
            for attr, value, unit in self.ref.value.get_avus(path)
        ]

    def get_permission_for_data_object(self, path: str, username: str, zone: str) -> FilePermission:
        perm = self.ref.value.get_permission(rm_last_slash(path), username, zone)
        return FilePermission.from_permission(perm)

    def list_permissions_for_data_object(self, path: str) -> list[UserFilePermission]:
        repo = self.ref.value
        if not repo.is_file(path):
            raise EntryNotFoundError(path)
        return acl_records(repo, path)

    def set_access_permission_own(self, zone: str, path: str, username: str) -> None:
        LOG.debug("Ignoring own-permission grant on %s for %s#%s", path, username, zone)


class MockUserGroupAccess(_Accessor):
    def find_user_groups_for_user(self, username: str) -> list[UserGroup]:
        groups = self.ref.value.get_user_groups(username, self.account.zone)
        return [UserGroup(user_group_name=g.name, zone=g.zone) for g in groups]


class MockUserAccess(_Accessor):
    def find_by_name(self, name: str) -> User:
        if not self.ref.value.user_exists(name, self.account.zone):
            raise DataNotFoundError(f"unknown user {name}#{self.account.zone}")
        return User(name=name, zone=self.account.zone)


class MockQuotaAccess(_Accessor):
    """Quotas are not modelled."""

    pass
