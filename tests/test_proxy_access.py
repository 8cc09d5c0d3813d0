"""Tests for boxy.proxy — access objects over a shared repository reference."""

import threading
from datetime import datetime, timezone

import pytest

from boxy.config import BoxyConfig
from boxy.exceptions import DataNotFoundError, EntryNotFoundError, InvalidTargetError
from boxy.proxy import Account, RepositoryRef, mk_mock_proxy
from boxy.proxy.records import AvuData, FilePermission, ObjectType, SpecColType
from boxy.repo import Identity, Repository


@pytest.fixture
def factory(proxy):
    return proxy.get_access_object_factory()


class TestRepositoryRef:
    """Tests for RepositoryRef."""

    def test_update_installs_new_value(self, ref):
        before = ref.value
        after = ref.update(Repository.add_file, "/zone/new")
        assert ref.value is after
        assert after.contains_entry("/zone/new")
        assert not before.contains_entry("/zone/new")

    def test_failed_update_keeps_value(self, ref):
        before = ref.value
        with pytest.raises(InvalidTargetError):
            ref.update(Repository.write_to_file, "/missing", "x", 0)
        assert ref.value is before

    def test_defaults_to_empty_repository(self):
        assert len(RepositoryRef().value) == 0

    def test_concurrent_updates_are_serialized(self, ref):
        def worker(i):
            ref.update(Repository.add_avu, "/zone", f"attr-{i}", str(i), "")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert len(ref.value.get_avus("/zone")) == 20


class TestEntryListAccess:
    """Listing and paging of collection members."""

    def test_collections_under_path(self, factory, account):
        page = factory.get_entry_list_access(account).list_collections_under_path("/zone/home/user", 0)
        assert len(page) == 1
        entry = page[0]
        assert entry.path_or_name == "/zone/home/user/link"
        assert entry.parent_path == "/zone/home/user"
        assert entry.object_type is ObjectType.COLLECTION
        assert entry.spec_col_type is SpecColType.LINKED_COLL
        assert entry.count == 1
        assert entry.last_result is True

    def test_data_objects_under_path(self, factory, account):
        page = factory.get_entry_list_access(account).list_data_objects_under_path("/zone/home/user", 0)
        assert [e.path_or_name for e in page] == ["empty", "file"]
        assert [e.last_result for e in page] == [False, True]
        assert page[0].object_type is ObjectType.DATA_OBJECT
        assert page[0].spec_col_type is None
        assert page[1].permissions[0].permission is FilePermission.OWN

    def test_entry_metadata(self, factory, account):
        entry = factory.get_entry_list_access(account).get_entry_at_path("/zone/home/user/empty")
        assert entry.owner_name == "user"
        assert entry.owner_zone == "zone"
        assert entry.created_at == datetime(1970, 1, 1, 0, 0, 0, 1000, tzinfo=timezone.utc)
        assert entry.modified_at == datetime(1970, 1, 1, 0, 0, 0, 2000, tzinfo=timezone.utc)
        assert entry.last_result is True

    def test_entry_at_missing_path(self, factory, account):
        with pytest.raises(EntryNotFoundError):
            factory.get_entry_list_access(account).get_entry_at_path("/missing")

    def test_paging(self, ref, account):
        for i in range(5):
            ref.update(Repository.add_file, f"/zone/home/user/f{i}")
        lister = mk_mock_proxy(ref, BoxyConfig(page_size=3)).get_access_object_factory().get_entry_list_access(account)

        first = lister.list_data_objects_under_path("/zone/home/user", 0)
        assert [e.path_or_name for e in first] == ["empty", "file", "f0"]
        assert [e.count for e in first] == [1, 2, 3]
        assert not any(e.last_result for e in first)

        last = lister.list_data_objects_under_path("/zone/home/user", 6)
        assert [e.path_or_name for e in last] == ["f4"]
        assert last[0].last_result is True

    def test_exact_final_page(self, ref, account):
        ref.update(Repository.add_file, "/zone/home/user/f0")
        lister = mk_mock_proxy(ref, BoxyConfig(page_size=3)).get_access_object_factory().get_entry_list_access(account)
        page = lister.list_data_objects_under_path("/zone/home/user", 0)
        assert [e.last_result for e in page] == [False, False, True]

    def test_negative_start_index_reads_from_start(self, factory, account):
        lister = factory.get_entry_list_access(account)
        page = lister.list_data_objects_under_path("/zone/home/user", -1)
        assert [e.path_or_name for e in page] == ["empty", "file"]
        assert [e.last_result for e in page] == [False, True]
        collections = lister.list_collections_under_path("/zone/home/user", -5)
        assert [e.path_or_name for e in collections] == ["/zone/home/user/link"]


class TestFileSystemAccess:
    """Tests for MockFileSystemAccess.get_list_in_dir."""

    def test_directory_listing(self, proxy, factory, account):
        file = proxy.get_file_factory(account).instance_file("/zone/home/user/")
        names = factory.get_file_system_access(account).get_list_in_dir(file)
        assert names == ["empty", "file", "link"]

    def test_file_lists_parent(self, proxy, factory, account):
        file = proxy.get_file_factory(account).instance_file("/zone/home/user/file")
        assert "empty" in factory.get_file_system_access(account).get_list_in_dir(file)

    def test_missing_raises(self, proxy, factory, account):
        file = proxy.get_file_factory(account).instance_file("/missing")
        with pytest.raises(EntryNotFoundError):
            factory.get_file_system_access(account).get_list_in_dir(file)

    def test_out_of_memory(self, ref, account):
        proxy = mk_mock_proxy(ref, BoxyConfig(out_of_memory=True))
        file = proxy.get_file_factory(account).instance_file("/zone")
        with pytest.raises(MemoryError):
            proxy.get_access_object_factory().get_file_system_access(account).get_list_in_dir(file)


class TestCollectionAccess:
    """Tests for MockCollectionAccess."""

    def test_permission_for_collection(self, factory, account):
        collections = factory.get_collection_access(account)
        assert collections.get_permission_for_collection("/zone/home/user/", "user", "zone") is FilePermission.WRITE
        assert collections.get_permission_for_collection("/zone", "user", "zone") is FilePermission.NONE

    def test_list_permissions(self, factory, account):
        perms = factory.get_collection_access(account).list_permissions_for_collection("/zone/home")
        assert [(p.user_name, p.user_zone, p.permission) for p in perms] == [
            ("group", "zone", FilePermission.READ)
        ]

    @pytest.mark.parametrize("path", ["/zone/home/", "/zone/home/user/file", "/missing"])
    def test_list_permissions_rejects(self, factory, account, path):
        with pytest.raises(EntryNotFoundError):
            factory.get_collection_access(account).list_permissions_for_collection(path)


class TestDataObjectAccess:
    """Tests for MockDataObjectAccess."""

    def test_add_and_find_metadata(self, ref, factory, account):
        data_objects = factory.get_data_object_access(account)
        data_objects.add_avu_metadata("/zone/home/user/empty/", AvuData(attribute="a", value="v", unit="u"))

        records = data_objects.find_metadata_values_for_data_object("/zone/home/user/empty")
        assert [(r.attribute, r.value, r.unit) for r in records] == [("a", "v", "u")]
        assert records[0].domain_object_id == "/zone/home/user/empty"
        assert ref.value.get_avus("/zone/home/user/empty") == [("a", "v", "u")]

    def test_add_metadata_to_missing(self, factory, account):
        with pytest.raises(InvalidTargetError):
            factory.get_data_object_access(account).add_avu_metadata("/missing", AvuData(attribute="a", value="v"))

    def test_find_metadata_missing_is_empty(self, factory, account):
        assert factory.get_data_object_access(account).find_metadata_values_for_data_object("/missing") == []

    def test_permissions(self, factory, account):
        data_objects = factory.get_data_object_access(account)
        assert data_objects.get_permission_for_data_object("/zone/home/user/file", "user", "zone") is FilePermission.OWN
        perms = data_objects.list_permissions_for_data_object("/zone/home/user/file")
        assert [p.permission for p in perms] == [FilePermission.OWN]
        with pytest.raises(EntryNotFoundError):
            data_objects.list_permissions_for_data_object("/zone/home")

    def test_set_access_permission_own_is_noop(self, ref, factory, account):
        before = ref.value
        factory.get_data_object_access(account).set_access_permission_own("zone", "/zone", "user")
        assert ref.value is before


class TestUserAndGroupAccess:
    """Tests for MockUserAccess and MockUserGroupAccess."""

    def test_find_user(self, factory, account):
        user = factory.get_user_access(account).find_by_name("user")
        assert (user.name, user.zone) == ("user", "zone")

    def test_find_unknown_user(self, factory, account):
        with pytest.raises(DataNotFoundError):
            factory.get_user_access(account).find_by_name("unknown")

    def test_user_groups_use_account_zone(self, factory, account):
        groups = factory.get_user_group_access(account).find_user_groups_for_user("user")
        assert [(g.user_group_name, g.zone) for g in groups] == [("group", "zone")]

        other = Account("user", "elsewhere")
        assert factory.get_user_group_access(other).find_user_groups_for_user("user") == []

    def test_acl_is_not_enforced(self, ref, proxy):
        stranger = Account("stranger", "zone")
        file = proxy.get_file_factory(stranger).instance_file("/zone/home/user/file")
        with proxy.get_file_factory(stranger).instance_output_stream(file) as stream:
            stream.write(b"X")
        assert ref.value.get_content("/zone/home/user/file") == "Xontent"
        assert ref.value.get_permission("/zone/home/user/file", "stranger", "zone") is None
        assert Identity("stranger", "zone") not in ref.value.users
