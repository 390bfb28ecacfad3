from __future__ import annotations

import tempfile
from hashlib import sha256
from pathlib import Path
from typing import Protocol

"""
Durable key-value slots.

The location stabilizer keeps one serialized position under a fixed key so the
app can render something before the first live fix. Two backends:
- `FileStore`: one file per key under `.cache/trono/` by default; keys are hashed
  (SHA-256) to avoid filesystem path issues; writes are atomic.
- `MemoryStore`: process-local dict (tests, ephemeral sessions).

Reads return None on any problem. Writes may raise `OSError`; callers that treat
persistence as best-effort catch it themselves.
"""


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class FileStore:
    """A filesystem-backed store: last write wins per key."""

    def __init__(self, base_dir: Path, enabled: bool = True):
        self._base_dir = base_dir
        self._enabled = enabled

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _key_path(self, key: str) -> Path:
        digest = sha256(key.encode("utf-8")).hexdigest()
        return self._base_dir / f"{digest}.txt"

    def get(self, key: str) -> str | None:
        if not self._enabled:
            return None
        path = self._key_path(key)
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def set(self, key: str, value: str) -> None:
        """Write via a temporary file + atomic replace to avoid partial slots."""
        if not self._enabled:
            return None
        path = self._key_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        # Unique temp name per writer; concurrent writers race only on the final replace.
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=path.stem, suffix=".tmp", delete=False
        ) as tmp:
            tmp.write(value)
        try:
            Path(tmp.name).replace(path)
        except OSError:
            Path(tmp.name).unlink(missing_ok=True)
            raise


class MemoryStore:
    """A dict-backed store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
