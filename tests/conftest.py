"""
Shared test fixtures.

The ``repo_doc`` fixture describes a small zone: a home collection shared
with a group, a user collection, two files and a linked collection.
"""

import pytest

from boxy.config import BoxyConfig
from boxy.proxy import Account, RepositoryRef, mk_mock_proxy
from boxy.repo import load_repository


def _dir(create_time=0, modify_time=0, acl=(), kind="normal-dir"):
    return {
        "type": kind,
        "creator": {"name": "user", "zone": "zone"},
        "create_time": create_time,
        "modify_time": modify_time,
        "acl": list(acl),
        "avus": {},
    }


@pytest.fixture
def repo_doc():
    return {
        "users": [{"name": "user", "zone": "zone"}],
        "groups": [
            {"name": "group", "zone": "zone", "members": [{"name": "user", "zone": "zone"}]},
        ],
        "entries": {
            "/zone": _dir(),
            "/zone/home": _dir(acl=[{"name": "group", "zone": "zone", "permission": "read"}]),
            "/zone/home/user": _dir(acl=[{"name": "user", "zone": "zone", "permission": "write"}]),
            "/zone/home/user/empty": {
                "type": "file",
                "creator": {"name": "user", "zone": "zone"},
                "create_time": 1,
                "modify_time": 2,
                "acl": [],
                "avus": {},
                "content": "",
            },
            "/zone/home/user/file": {
                "type": "file",
                "creator": {"name": "user", "zone": "zone"},
                "create_time": 3,
                "modify_time": 3,
                "acl": [{"name": "user", "zone": "zone", "permission": "own"}],
                "avus": {
                    "has-unit": {"value": "value", "unit": "unit"},
                    "unitless": {"value": "value", "unit": ""},
                },
                "content": "content",
            },
            "/zone/home/user/link": _dir(create_time=4, modify_time=4, kind="linked-dir"),
        },
    }


@pytest.fixture
def repo(repo_doc):
    return load_repository(repo_doc)


@pytest.fixture
def ref(repo):
    return RepositoryRef(repo)


@pytest.fixture
def account():
    return Account("user", "zone")


@pytest.fixture
def config():
    return BoxyConfig(page_size=5)


@pytest.fixture
def proxy(ref, config):
    return mk_mock_proxy(ref, config)
