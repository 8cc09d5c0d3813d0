"""
Mutable reference to the current repository value.

Access objects read ``ref.value`` freely. Writers go through ``update``,
which serializes the read-compute-replace cycle so two writers never both
derive from the same snapshot and drop each other's change.
"""

from __future__ import annotations

import threading
from typing import Any, Callable

from boxy.repo.store import Repository


class RepositoryRef:
    """Holds the latest Repository and installs updated values."""

    def __init__(self, repo: Repository | None = None) -> None:
        self._value = repo if repo is not None else Repository()
        self._lock = threading.Lock()

    @property
    def value(self) -> Repository:
        return self._value

    def update(self, fn: Callable[..., Repository], *args: Any, **kwargs: Any) -> Repository:
        """
        Apply ``fn(current, *args, **kwargs)`` and install its result.

        If ``fn`` raises, the current value is left in place.
        """
        with self._lock:
            new_value = fn(self._value, *args, **kwargs)
            self._value = new_value
        return new_value
