"""
Checkpoint storage backends for trivia-quiz

Backends: file (one JSON file per key) and memory (tests, --no-save).
"""

from .base import StorageBackend, StorageError
from .file import FileStorage
from .memory import MemoryStorage

__all__ = [
    "StorageBackend",
    "StorageError",
    "FileStorage",
    "MemoryStorage",
]


def get_storage(name: str, **kwargs) -> StorageBackend:
    """
    Factory function to get a storage backend by name.

    Args:
        name: Backend name ('file', 'memory')
        **kwargs: Backend-specific options

    Returns:
        Configured StorageBackend instance

    Raises:
        ValueError: If backend name is unknown
    """
    backends = {
        "file": FileStorage,
        "memory": MemoryStorage,
    }

    if name not in backends:
        raise ValueError(f"Unknown storage backend: {name}. Valid options: {list(backends.keys())}")

    return backends[name](**kwargs)
