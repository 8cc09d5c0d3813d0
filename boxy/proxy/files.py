"""File handles and output streams over a RepositoryRef."""

from __future__ import annotations

import logging
from typing import Optional

from boxy.exceptions import EntryExistsError
from boxy.paths import dirname, rm_last_slash
from boxy.proxy.access import Account
from boxy.proxy.records import ObjStat, SpecColType
from boxy.proxy.ref import RepositoryRef
from boxy.repo.store import Repository

LOG = logging.getLogger("proxy.files")

# Content is modelled as 8-bit text.
CONTENT_ENCODING = "latin-1"


class MockFile:
    """A file or directory path in the repository, as seen by ``account``."""

    def __init__(self, ref: RepositoryRef, account: Account, path: str) -> None:
        self.ref = ref
        self.account = account
        self.path = path

    def __repr__(self) -> str:
        return f"MockFile({self.path!r})"

    def get_absolute_path(self) -> str:
        return rm_last_slash(self.path)

    def get_parent(self) -> str:
        return dirname(self.path)

    def exists(self) -> bool:
        return self.ref.value.contains_entry(self.get_absolute_path())

    def is_directory(self) -> bool:
        return self.ref.value.is_directory(self.get_absolute_path())

    def is_file(self) -> bool:
        return self.ref.value.is_file(self.get_absolute_path())

    def create_new_file(self) -> bool:
        """Add an empty file at this path. Returns False if something is already there."""
        try:
            self.ref.update(Repository.add_file, self.get_absolute_path())
        except EntryExistsError:
            return False
        return True

    def initialize_obj_stat(self) -> ObjStat:
        """Stat carrying only the collection type of the entry."""
        repo = self.ref.value
        path = self.get_absolute_path()
        if not repo.contains_entry(path):
            return ObjStat()
        return ObjStat(spec_col_type=SpecColType.for_entry_type(repo.get_type(path)))

    def delete(self) -> bool:
        # Deletion is not supported by the repository.
        return False

    def mkdirs(self) -> bool:
        return False

    def close(self) -> None:
        pass


class MockFileOutputStream:
    """Writes bytes into a file entry, advancing a position like a real stream."""

    def __init__(self, file: MockFile) -> None:
        self.file = file
        self.position = 0
        self.closed = False

    def write(self, buffer: bytes, offset: int = 0, length: Optional[int] = None) -> int:
        """
        Write ``buffer[offset:offset + length]`` at the current position.

        Returns the number of bytes written.
        """
        if self.closed:
            raise ValueError("write to closed stream")
        if length is None:
            length = len(buffer) - offset
        data = bytes(buffer[offset : offset + length]).decode(CONTENT_ENCODING)
        self.file.ref.update(Repository.write_to_file, self.file.get_absolute_path(), data, self.position)
        self.position += len(data)
        return len(data)

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "MockFileOutputStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MockFileFactory:
    """Creates MockFile handles and output streams for one account."""

    def __init__(self, ref: RepositoryRef, account: Account) -> None:
        self.ref = ref
        self.account = account

    def instance_file(self, path: str) -> MockFile:
        return MockFile(self.ref, self.account, path)

    def instance_output_stream(self, file: MockFile) -> MockFileOutputStream:
        return MockFileOutputStream(file)
