"""
In-memory artifact store.
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Union

from .base import ArtifactStore

logger = logging.getLogger(__name__)


class MemoryStore(ArtifactStore):
    """
    Thread-safe path-to-bytes store.

    Paths are normalized to absolute form, so `dist/./a.js` and `dist/a.js`
    refer to the same entry.
    """

    def __init__(self):
        self._files: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _normalize(path: str) -> str:
        return os.path.abspath(os.fspath(path))

    def write(self, path: str, data: Union[bytes, str]) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        key = self._normalize(path)
        with self._lock:
            self._files[key] = bytes(data)
        logger.debug(f"Stored {len(data)} bytes at {key}")

    def read(self, path: str) -> bytes:
        key = self._normalize(path)
        with self._lock:
            try:
                return self._files[key]
            except KeyError:
                raise FileNotFoundError(f"no such file in memory store: {key}") from None

    def exists(self, path: str) -> bool:
        with self._lock:
            return self._normalize(path) in self._files

    def remove(self, path: str) -> None:
        with self._lock:
            self._files.pop(self._normalize(path), None)

    def list_paths(self) -> List[str]:
        with self._lock:
            return sorted(self._files)

    def clear(self) -> None:
        with self._lock:
            self._files.clear()

    def ingest_directory(self, source_dir: Path, target_dir: str,
                         names: Iterable[str]) -> int:
        """
        Copy the named files from a directory on disk into the store.

        Each `source_dir/name` is stored under `target_dir/name`. Missing
        files are skipped.

        Returns:
            The number of files stored
        """
        count = 0
        for name in names:
            source = Path(source_dir) / name
            if not source.is_file():
                logger.debug(f"Skipping missing emitted asset {source}")
                continue
            self.write(os.path.join(target_dir, name), source.read_bytes())
            count += 1
        return count
