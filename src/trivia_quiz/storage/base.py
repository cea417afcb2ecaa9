"""
Base protocol for checkpoint storage backends

A backend is a small key/value store for serialized checkpoints.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..errors import StorageError


class StorageBackend(ABC):
    """
    Abstract base class for checkpoint storage.

    Backends hold string values under string keys and raise
    StorageError on any failure. Callers decide whether to swallow it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'file', 'memory')."""
        pass

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageError: If the store cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a value under a key, replacing any previous value.

        Raises:
            StorageError: If the value cannot be written
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """
        Remove a key. Removing an absent key is not an error.

        Raises:
            StorageError: If the key cannot be removed
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


__all__ = ["StorageBackend", "StorageError"]
