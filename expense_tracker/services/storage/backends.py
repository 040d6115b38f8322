"""
Key-Value Backends

DESIGN DECISION: The file backend keeps one file per key under a
directory, holding exactly the text that was set. Writes go to a
temporary file in the same directory and are renamed into place, so a
crash mid-write leaves the previous value intact.

TRADEOFFS:
- No locking. Two processes writing the same key: last writer wins.
- Transient OS errors (e.g. a file briefly held open by another
  program on Windows) are retried a few times before giving up.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expense_tracker.services.storage.interface import (
    KeyValueBackend,
    StorageReadError,
    StorageWriteError,
)


_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


def _check_key(key: str) -> str:
    if not _KEY_PATTERN.match(key) or key in (".", ".."):
        raise ValueError(f"Invalid storage key: {key!r}")
    return key


class InMemoryKeyValueBackend(KeyValueBackend):
    """Dict-backed backend. Contents vanish with the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class FileKeyValueBackend(KeyValueBackend):
    """
    One UTF-8 file per key: <directory>/<key>.json

    The directory is created on first write.
    """

    def __init__(self, directory: Union[str, os.PathLike]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{_check_key(key)}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Could not read {path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            self._write_atomic(path, value)
        except OSError as e:
            raise StorageWriteError(f"Could not write {path}: {e}") from e

    def remove_item(self, key: str) -> None:
        path = self.path_for(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageWriteError(f"Could not remove {path}: {e}") from e

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, path: Path, value: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.stem}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            # The rename did not happen; drop the partial temp file
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
