"""On-disk snapshot of cache pools."""

from __future__ import annotations

from dataclasses import dataclass
import json
from pathlib import Path
from typing import Any, Dict, Generic, Mapping, Optional, TypeVar

from ..errors import PersistenceError

SNAPSHOT_VERSION = 1

T = TypeVar("T")


@dataclass(frozen=True)
class PersistenceResult(Generic[T]):
    """Outcome of a store operation; ``error`` is set when it failed."""

    value: Optional[T] = None
    error: Optional[PersistenceError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Optional[T] = None) -> "PersistenceResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, message: str, operation: str) -> "PersistenceResult[T]":
        return cls(error=PersistenceError(message, operation))


class SnapshotStore:
    """Reads and writes a versioned JSON snapshot file. Never raises."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def save(self, snapshot: Mapping[str, Any]) -> PersistenceResult[None]:
        payload = dict(snapshot)
        payload["version"] = SNAPSHOT_VERSION
        try:
            text = json.dumps(payload, indent=2, sort_keys=True)
        except (TypeError, ValueError) as exc:
            return PersistenceResult.failure(f"Snapshot is not serialisable: {exc}", "save")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(text, encoding="utf-8")
        except OSError as exc:
            return PersistenceResult.failure(f"Failed to write {self.path}: {exc}", "save")
        return PersistenceResult.success()

    def load(self) -> PersistenceResult[Dict[str, Any]]:
        """Return the stored snapshot; a missing file is an empty, ok result."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return PersistenceResult.success(None)
        except (OSError, UnicodeDecodeError) as exc:
            return PersistenceResult.failure(f"Failed to read {self.path}: {exc}", "load")
        except json.JSONDecodeError as exc:
            return PersistenceResult.failure(f"Malformed snapshot {self.path}: {exc}", "load")
        if not isinstance(data, dict):
            return PersistenceResult.failure(f"Snapshot {self.path} is not an object", "load")
        if data.get("version") != SNAPSHOT_VERSION:
            return PersistenceResult.failure(
                f"Unsupported snapshot version {data.get('version')!r} in {self.path}", "load"
            )
        return PersistenceResult.success(data)

    def clear(self) -> PersistenceResult[None]:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            return PersistenceResult.failure(f"Failed to remove {self.path}: {exc}", "clear")
        return PersistenceResult.success()


__all__ = ["PersistenceResult", "SNAPSHOT_VERSION", "SnapshotStore"]
