"""
Entry point for the mock proxy.

mk_mock_proxy wires every accessor to one RepositoryRef, so writes made
through any of them are visible to all the others.
"""

from __future__ import annotations

import logging
from typing import Optional

from boxy.config import BoxyConfig
from boxy.proxy.access import (
    Account,
    MockCollectionAccess,
    MockDataObjectAccess,
    MockEntryListAccess,
    MockFileSystemAccess,
    MockQuotaAccess,
    MockUserAccess,
    MockUserGroupAccess,
)
from boxy.proxy.files import MockFileFactory
from boxy.proxy.ref import RepositoryRef

LOG = logging.getLogger("proxy.factory")


class MockAccessObjectFactory:
    """Creates account-bound accessors over a shared repository reference."""

    def __init__(self, ref: RepositoryRef, config: BoxyConfig) -> None:
        self.ref = ref
        self.config = config

    def get_file_system_access(self, account: Account) -> MockFileSystemAccess:
        return MockFileSystemAccess(self.ref, account, out_of_memory=self.config.out_of_memory)

    def get_entry_list_access(self, account: Account) -> MockEntryListAccess:
        return MockEntryListAccess(self.ref, account, page_size=self.config.page_size)

    def get_collection_access(self, account: Account) -> MockCollectionAccess:
        return MockCollectionAccess(self.ref, account)

    def get_data_object_access(self, account: Account) -> MockDataObjectAccess:
        return MockDataObjectAccess(self.ref, account)

    def get_user_group_access(self, account: Account) -> MockUserGroupAccess:
        return MockUserGroupAccess(self.ref, account)

    def get_user_access(self, account: Account) -> MockUserAccess:
        return MockUserAccess(self.ref, account)

    def get_quota_access(self, account: Account) -> MockQuotaAccess:
        return MockQuotaAccess(self.ref, account)


class MockProxy:
    """Hands out the access object factory and per-account file factories."""

    def __init__(self, ref: RepositoryRef, config: BoxyConfig) -> None:
        self.ref = ref
        self.config = config

    def get_access_object_factory(self) -> MockAccessObjectFactory:
        return MockAccessObjectFactory(self.ref, self.config)

    def get_file_factory(self, account: Account) -> MockFileFactory:
        return MockFileFactory(self.ref, account)

    def close(self) -> None:
        pass


def mk_mock_proxy(ref: RepositoryRef, config: Optional[BoxyConfig] = None) -> MockProxy:
    """
    Build a MockProxy over mutable repository content.

    Args:
        ref: Reference holding the repository; updated in place by writes
        config: Access-layer settings; read from the environment if omitted
    """
    if config is None:
        config = BoxyConfig.from_env()
    LOG.debug("Creating mock proxy (page_size=%d)", config.page_size)
    return MockProxy(ref, config)
