"""
JSON File Gateway

One UTF-8 file per slot inside a data directory.

TRADEOFFS:
- Whole-slot rewrites on every save (fine at personal-finance scale)
- Writes go to a temp file first and are renamed into place, so a
  crash mid-save never leaves a half-written slot behind
- File I/O runs in a worker thread so the event loop is not blocked
"""

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from spendy.services.storage.interface import (
    LoadError,
    PersistenceError,
    PersistenceGateway,
)


_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class JsonFileGateway(PersistenceGateway):
    """
    File-per-key gateway.

    Keys are mapped to file names by replacing anything outside
    [A-Za-z0-9_.-] with an underscore.
    """

    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        suffix: Optional[str] = None,
    ):
        if data_dir is None or suffix is None:
            from spendy.config import get_settings
            settings = get_settings()
            if data_dir is None:
                data_dir = settings.ledger.data_dir
            if suffix is None:
                suffix = settings.storage.file_suffix
        self._data_dir = Path(data_dir)
        self._suffix = suffix

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        """File that holds a slot."""
        if not key:
            raise ValueError("Slot key cannot be empty")
        return self._data_dir / f"{_UNSAFE_CHARS.sub('_', key)}{self._suffix}"

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, blob: str) -> bool:
        await asyncio.to_thread(self._write, key, blob)
        return True

    def _read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(f"Failed to read {path}: {e}") from e

    def _write(self, key: str, blob: str) -> None:
        path = self.path_for(key)
        tmp_name = None
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir,
                prefix=f".{path.name}.",
                suffix=".tmp",
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(blob)
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Failed to write {path}: {e}") from e
