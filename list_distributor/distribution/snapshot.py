"""Assemble immutable distribution snapshots from partition output."""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from ..errors import EmptyInputError, EmptyRosterError, InvariantViolation
from ..models import Agent, AgentAssignment, DistributionSnapshot, Record, UploadSummary
from .partitioner import partition

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_snapshot_id() -> str:
    return uuid.uuid4().hex


def build_snapshot(
    records: Sequence[Record],
    agents: Sequence[Agent],
    file_name: str,
    *,
    clock: Optional[Clock] = None,
    id_factory: Optional[IdFactory] = None,
) -> DistributionSnapshot:
    """Partition ``records`` across ``agents`` and wrap the result in a snapshot.

    Raises :class:`EmptyRosterError` when ``agents`` is empty and
    :class:`EmptyInputError` when there are no records; in both cases nothing
    is partitioned. The timestamp and identifier are captured here rather
    than left to the store.
    """

    roster = tuple(agents)
    if not roster:
        raise EmptyRosterError("No active agents found. Please add agents first.")

    usable = tuple(records)
    if not usable:
        raise EmptyInputError("No valid records found in the uploaded file")

    assignments = tuple(partition(usable, roster))
    _check_invariants(assignments, total_records=len(usable), agent_count=len(roster))

    return DistributionSnapshot(
        id=(id_factory or new_snapshot_id)(),
        file_name=file_name,
        upload_date=(clock or utc_now)(),
        total_records=len(usable),
        assignments=assignments,
    )


def summarize(snapshot: DistributionSnapshot) -> UploadSummary:
    """Return the per-agent counts shown right after an upload."""

    return UploadSummary(
        total_records=snapshot.total_records,
        agent_count=snapshot.agent_count,
        assignments=tuple(assignment.summary() for assignment in snapshot.assignments),
    )


def _check_invariants(
    assignments: Sequence[AgentAssignment],
    *,
    total_records: int,
    agent_count: int,
) -> None:
    if len(assignments) != agent_count:
        raise InvariantViolation(f"Partition produced {len(assignments)} assignments for {agent_count} agents")
    assigned = sum(assignment.record_count for assignment in assignments)
    if assigned != total_records:
        raise InvariantViolation(f"Partition assigned {assigned} of {total_records} records")


__all__ = ["build_snapshot", "new_snapshot_id", "summarize", "utc_now"]
