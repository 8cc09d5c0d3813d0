"""
In-memory mock repository.

Provides:
- Repository: immutable store of users, groups and path-keyed entries
- Entry types: DirectoryEntry, FileEntry and their field types
- Document loading: load_repository / loads_repository / dump_repository
"""

from boxy.repo.document import dump_repository, load_repository, loads_repository
from boxy.repo.models import Avu, DirectoryEntry, Entry, EntryType, FileEntry, Identity, Permission
from boxy.repo.store import Repository

__all__ = [
    "Avu",
    "DirectoryEntry",
    "Entry",
    "EntryType",
    "FileEntry",
    "Identity",
    "Permission",
    "Repository",
    "dump_repository",
    "load_repository",
    "loads_repository",
]
