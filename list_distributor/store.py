"""Persistence for distribution snapshots."""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, List, Protocol

from .errors import DuplicateSnapshotError, InvalidSnapshotIdError, ParseError, SnapshotNotFoundError
from .models import DistributionSnapshot, SnapshotSummary

LOGGER = logging.getLogger(__name__)


class DistributionStore(Protocol):
    """Protocol implemented by snapshot stores."""

    def save(self, snapshot: DistributionSnapshot) -> None:  # pragma: no cover - runtime protocol
        """Persist a new snapshot."""

    def get(self, snapshot_id: str) -> DistributionSnapshot:  # pragma: no cover - runtime protocol
        """Return the full snapshot stored under ``snapshot_id``."""

    def list_summaries(self) -> List[SnapshotSummary]:  # pragma: no cover - runtime protocol
        """Return summaries of every stored snapshot, newest first."""

    def delete(self, snapshot_id: str) -> None:  # pragma: no cover - runtime protocol
        """Remove the snapshot stored under ``snapshot_id``."""


def _is_safe_id(snapshot_id: str) -> bool:
    return bool(snapshot_id) and not snapshot_id.startswith(".") and not any(char in snapshot_id for char in "/\\")


def _newest_first(summaries: Iterable[SnapshotSummary]) -> List[SnapshotSummary]:
    ordered = sorted(summaries, key=lambda summary: summary.id)
    ordered.sort(key=lambda summary: summary.upload_date, reverse=True)
    return ordered


class InMemoryDistributionStore:
    """Keeps snapshots in a dictionary for the lifetime of the process."""

    def __init__(self) -> None:
        self._snapshots: Dict[str, DistributionSnapshot] = {}
        self._lock = threading.Lock()

    def save(self, snapshot: DistributionSnapshot) -> None:
        with self._lock:
            if snapshot.id in self._snapshots:
                raise DuplicateSnapshotError(f"Snapshot '{snapshot.id}' already exists")
            self._snapshots[snapshot.id] = snapshot

    def get(self, snapshot_id: str) -> DistributionSnapshot:
        with self._lock:
            try:
                return self._snapshots[snapshot_id]
            except KeyError:
                raise SnapshotNotFoundError(f"Distribution '{snapshot_id}' not found") from None

    def list_summaries(self) -> List[SnapshotSummary]:
        with self._lock:
            snapshots = list(self._snapshots.values())
        return _newest_first(snapshot.summary() for snapshot in snapshots)

    def delete(self, snapshot_id: str) -> None:
        with self._lock:
            if self._snapshots.pop(snapshot_id, None) is None:
                raise SnapshotNotFoundError(f"Distribution '{snapshot_id}' not found")


class JsonDistributionStore:
    """Stores each snapshot as ``<id>.json`` inside a directory."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)
        self._directory.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    @property
    def directory(self) -> Path:
        return self._directory

    def save(self, snapshot: DistributionSnapshot) -> None:
        if not _is_safe_id(snapshot.id):
            raise InvalidSnapshotIdError(f"Snapshot identifier {snapshot.id!r} cannot be used as a file name")
        destination = self._directory / f"{snapshot.id}.json"
        payload = json.dumps(snapshot.to_dict(), ensure_ascii=False, indent=2)
        with self._lock:
            if destination.exists():
                raise DuplicateSnapshotError(f"Snapshot '{snapshot.id}' already exists")
            fd, temp_name = tempfile.mkstemp(dir=self._directory, prefix=".tmp-", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(temp_name, destination)
            except BaseException:
                Path(temp_name).unlink(missing_ok=True)
                raise
        LOGGER.debug("Wrote snapshot %s to %s", snapshot.id, destination)

    def get(self, snapshot_id: str) -> DistributionSnapshot:
        path = self._path_for(snapshot_id)
        try:
            return self._read(path)
        except FileNotFoundError:
            raise SnapshotNotFoundError(f"Distribution '{snapshot_id}' not found") from None

    def list_summaries(self) -> List[SnapshotSummary]:
        summaries: List[SnapshotSummary] = []
        for path in self._snapshot_paths():
            try:
                summaries.append(self._read(path).summary())
            except FileNotFoundError:
                LOGGER.debug("Snapshot %s disappeared while listing", path.name)
            except ParseError as exc:
                LOGGER.warning("Skipping unreadable snapshot %s: %s", path.name, exc)
        return _newest_first(summaries)

    def delete(self, snapshot_id: str) -> None:
        path = self._path_for(snapshot_id)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                raise SnapshotNotFoundError(f"Distribution '{snapshot_id}' not found") from None
        LOGGER.debug("Deleted snapshot %s", snapshot_id)

    def _snapshot_paths(self) -> List[Path]:
        return [path for path in self._directory.glob("*.json") if not path.name.startswith(".")]

    def _path_for(self, snapshot_id: str) -> Path:
        if not _is_safe_id(snapshot_id):
            raise SnapshotNotFoundError(f"Distribution '{snapshot_id}' not found")
        return self._directory / f"{snapshot_id}.json"

    @staticmethod
    def _read(path: Path) -> DistributionSnapshot:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return DistributionSnapshot.from_dict(data)
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as exc:
            raise ParseError(f"Stored snapshot '{path.name}' is corrupt: {exc}") from exc


__all__ = ["DistributionStore", "InMemoryDistributionStore", "JsonDistributionStore"]
