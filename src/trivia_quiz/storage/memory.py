"""
In-memory storage for testing

Keeps values in a dict and can simulate backend failures.
"""

import random
from typing import Optional

from .base import StorageBackend, StorageError


class MemoryStorage(StorageBackend):
    """
    Dict-backed storage.

    Used by tests and by `play --no-save`. Set fail_rate to make a
    fraction of operations raise StorageError.
    """

    def __init__(
        self,
        initial: Optional[dict] = None,
        fail_rate: float = 0.0,
    ):
        """
        Initialize memory storage.

        Args:
            initial: Optional starting contents
            fail_rate: Probability (0.0-1.0) of simulated failure per call
        """
        self.values: dict[str, str] = dict(initial or {})
        self.fail_rate = fail_rate
        self.call_count = 0

    @property
    def name(self) -> str:
        return "memory"

    def _maybe_fail(self, operation: str, key: str):
        self.call_count += 1
        if self.fail_rate > 0 and random.random() < self.fail_rate:
            raise StorageError(f"Simulated {operation} failure for {key!r}")

    def get(self, key: str) -> Optional[str]:
        self._maybe_fail("read", key)
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self._maybe_fail("write", key)
        self.values[key] = value

    def remove(self, key: str) -> None:
        self._maybe_fail("remove", key)
        self.values.pop(key, None)
