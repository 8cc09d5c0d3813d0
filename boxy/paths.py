"""Helpers for absolute, slash-separated repository paths."""

from __future__ import annotations

ROOT = "/"


def rm_last_slash(path: str) -> str:
    """Strip trailing slashes, leaving the root path intact."""
    stripped = path.rstrip("/")
    return stripped if stripped else (ROOT if path.startswith("/") else stripped)


def parent_path(path: str) -> str:
    """
    Return the parent of a normalized path by removing its last ``/segment``.

    The parent of a top-level path such as ``/zone`` is the root ``/``.
    """
    idx = path.rfind("/")
    if idx <= 0:
        return ROOT
    return path[:idx]


def dirname(path: str) -> str:
    """Parent directory of ``path``, ignoring any trailing slash."""
    return parent_path(rm_last_slash(path))


def basename(path: str) -> str:
    """Last segment of ``path``, ignoring any trailing slash."""
    normalized = rm_last_slash(path)
    return normalized[normalized.rfind("/") + 1 :]
