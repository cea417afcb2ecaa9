"""
File-backed checkpoint storage

Each key is a JSON file in a single directory.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from .base import StorageBackend, StorageError


_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStorage(StorageBackend):
    """
    Stores each key as `<directory>/<key>.json`.

    Writes go to a temp file in the same directory and are moved into
    place with os.replace, so a crash never leaves a half-written file.
    """

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory).expanduser()

    @property
    def name(self) -> str:
        return "file"

    def path_for(self, key: str) -> Path:
        """Path of the file holding a key."""
        if not _SAFE_KEY.match(key) or key.startswith("."):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}")

    def set(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self.directory
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StorageError(f"Could not write {path}: {e}")

    def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise StorageError(f"Could not remove {path}: {e}")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(directory={str(self.directory)!r})"
