"""Key/value blob storage backends.

Both backends implement ``scopekit.application.ports.BlobStorage``. They
only move bytes around; decoding and error conversion happen in the
repository.
"""

import re
from pathlib import Path

# Keys become file names, so anything outside this set is replaced
_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class FileBlobStorage:
    """Stores each key as ``<base_dir>/<key>.json``.

    Example:
        storage = FileBlobStorage(Path.home() / ".scopekit" / "data")
        storage.save_blob("projects_anonymous", b"[]")
        data = storage.load_blob("projects_anonymous")
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, key: str) -> Path:
        """Return the file backing ``key``."""
        return self._base_dir / f"{_UNSAFE_KEY_CHARS.sub('_', key)}.json"

    def load_blob(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def save_blob(self, key: str, data: bytes) -> None:
        """Write ``data`` for ``key``.

        The bytes go to a temporary sibling first and are then moved over
        the old file, so a failed write leaves the previous value intact.

        Raises:
            OSError: If the directory or file cannot be written.
        """
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_bytes(data)
        tmp_path.replace(path)


class InMemoryBlobStorage:
    """Dictionary-backed storage, mainly for tests.

    Args:
        quota_bytes: Optional limit on the total size of all stored blobs.
            A save that would exceed it raises ``OSError``, the same way a
            full browser store or disk would.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        self._blobs: dict[str, bytes] = {}
        self.quota_bytes = quota_bytes

    def load_blob(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    def save_blob(self, key: str, data: bytes) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v) for k, v in self._blobs.items() if k != key)
            if used + len(data) > self.quota_bytes:
                raise OSError("Storage quota exceeded")
        self._blobs[key] = bytes(data)

    def keys(self) -> list[str]:
        return sorted(self._blobs)
