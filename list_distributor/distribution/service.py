"""Upload workflow that reads the roster, parses a file and persists the split."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional

from ..errors import DistributionError, EmptyRosterError
from ..ingestion.loaders import DEFAULT_MAX_UPLOAD_BYTES, load_records, validate_upload
from ..ingestion.normalizer import normalize_rows
from ..models import Agent, DistributionSnapshot, Record, SnapshotSummary
from ..roster import RosterProvider
from ..store import DistributionStore
from .snapshot import Clock, IdFactory, build_snapshot

LOGGER = logging.getLogger(__name__)


class DistributionService:
    """Distributes uploaded contact lists across the active roster."""

    def __init__(
        self,
        roster: RosterProvider,
        store: DistributionStore,
        *,
        max_upload_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
    ) -> None:
        self._roster = roster
        self._store = store
        self._max_upload_bytes = max_upload_bytes
        self._clock = clock
        self._id_factory = id_factory

    @property
    def store(self) -> DistributionStore:
        return self._store

    def distribute_file(self, path: str | Path, *, file_name: Optional[str] = None) -> DistributionSnapshot:
        """Parse ``path`` and split its records across the active agents.

        The roster is read once, before the file is opened, and that exact
        list is used for the partition.
        """

        file_path = Path(path)
        display_name = file_name or file_path.name
        agents = self._active_agents()
        try:
            validate_upload(file_path, max_bytes=self._max_upload_bytes)
            records = load_records(file_path)
        except DistributionError as exc:
            LOGGER.warning("Rejected upload %s: %s", display_name, exc)
            raise
        return self._persist(records, agents, display_name)

    def distribute_rows(self, rows: Iterable[Mapping[Any, Any]], file_name: str) -> DistributionSnapshot:
        """Same as :meth:`distribute_file` for rows parsed elsewhere."""

        agents = self._active_agents()
        return self._persist(normalize_rows(rows), agents, file_name)

    def list_snapshots(self) -> List[SnapshotSummary]:
        return self._store.list_summaries()

    def get_snapshot(self, snapshot_id: str) -> DistributionSnapshot:
        return self._store.get(snapshot_id)

    def delete_snapshot(self, snapshot_id: str) -> None:
        self._store.delete(snapshot_id)
        LOGGER.info("Deleted distribution %s", snapshot_id)

    def _active_agents(self) -> List[Agent]:
        agents = list(self._roster.active_agents())
        if not agents:
            LOGGER.warning("Upload rejected: no active agents")
            raise EmptyRosterError("No active agents found. Please add agents first.")
        return agents

    def _persist(self, records: List[Record], agents: List[Agent], file_name: str) -> DistributionSnapshot:
        try:
            snapshot = build_snapshot(
                records,
                agents,
                file_name,
                clock=self._clock,
                id_factory=self._id_factory,
            )
        except DistributionError as exc:
            LOGGER.warning("Rejected upload %s: %s", file_name, exc)
            raise

        self._store.save(snapshot)
        LOGGER.info(
            "Distributed %s records from %s across %s agents (snapshot %s)",
            snapshot.total_records,
            file_name,
            snapshot.agent_count,
            snapshot.id,
        )
        return snapshot


__all__ = ["DistributionService"]
