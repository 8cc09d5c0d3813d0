"""
Access layer over a mutable repository reference.

Provides:
- RepositoryRef: holder for the current Repository value
- MockFile / MockFileOutputStream / MockFileFactory: file handles
- Mock*Access: collection, data object, listing, user and group accessors
- mk_mock_proxy: wires everything to one reference
"""

from boxy.proxy.access import Account
from boxy.proxy.factory import MockAccessObjectFactory, MockProxy, mk_mock_proxy
from boxy.proxy.files import MockFile, MockFileFactory, MockFileOutputStream
from boxy.proxy.ref import RepositoryRef

__all__ = [
    "Account",
    "MockAccessObjectFactory",
    "MockFile",
    "MockFileFactory",
    "MockFileOutputStream",
    "MockProxy",
    "RepositoryRef",
    "mk_mock_proxy",
]
