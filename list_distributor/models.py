"""Data models shared by the normaliser, partitioner, stores and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Tuple


# --- Input Models ---

@dataclass(frozen=True, slots=True)
class Record:
    """A single normalised contact entry."""

    first_name: str = ""
    phone: str = ""
    notes: str = ""

    def is_usable(self) -> bool:
        """Return ``True`` when the record carries a name or a phone number."""
        return bool(self.first_name.strip() or self.phone.strip())

    def to_dict(self) -> Dict[str, str]:
        return {"firstName": self.first_name, "phone": self.phone, "notes": self.notes}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Record":
        return cls(
            first_name=str(data.get("firstName") or ""),
            phone=str(data.get("phone") or ""),
            notes=str(data.get("notes") or ""),
        )


@dataclass(frozen=True, slots=True)
class Agent:
    """An identity eligible to receive assignments."""

    id: str
    name: str
    is_active: bool = True


# --- Distribution Models ---

@dataclass(frozen=True, slots=True)
class AgentAssignment:
    """Records handed to one agent.

    ``agent_id`` and ``agent_name`` are copied from the roster at partition
    time and stay frozen if the agent is later renamed or deactivated.
    """

    agent_id: str
    agent_name: str
    records: Tuple[Record, ...] = ()

    @property
    def record_count(self) -> int:
        return len(self.records)

    def summary(self) -> "AssignmentSummary":
        return AssignmentSummary(agent_name=self.agent_name, record_count=self.record_count)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "agentId": self.agent_id,
            "agentName": self.agent_name,
            "records": [record.to_dict() for record in self.records],
            "recordCount": self.record_count,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AgentAssignment":
        return cls(
            agent_id=str(data["agentId"]),
            agent_name=str(data["agentName"]),
            records=tuple(Record.from_dict(item) for item in data.get("records", [])),
        )


@dataclass(frozen=True, slots=True)
class DistributionSnapshot:
    """Immutable result of distributing one uploaded list."""

    id: str
    file_name: str
    upload_date: datetime
    total_records: int
    assignments: Tuple[AgentAssignment, ...] = ()

    @property
    def agent_count(self) -> int:
        return len(self.assignments)

    def records(self) -> List[Record]:
        """Return every record in agent order, reproducing the upload order."""
        return [record for assignment in self.assignments for record in assignment.records]

    def summary(self) -> "SnapshotSummary":
        return SnapshotSummary(
            id=self.id,
            file_name=self.file_name,
            upload_date=self.upload_date,
            total_records=self.total_records,
            agent_count=self.agent_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fileName": self.file_name,
            "uploadDate": self.upload_date.isoformat(),
            "totalRecords": self.total_records,
            "assignments": [assignment.to_dict() for assignment in self.assignments],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DistributionSnapshot":
        return cls(
            id=str(data["id"]),
            file_name=str(data["fileName"]),
            upload_date=datetime.fromisoformat(data["uploadDate"]),
            total_records=int(data["totalRecords"]),
            assignments=tuple(AgentAssignment.from_dict(item) for item in data.get("assignments", [])),
        )


# --- Summary Views ---

@dataclass(frozen=True, slots=True)
class AssignmentSummary:
    """Per-agent count shown right after an upload."""

    agent_name: str
    record_count: int


@dataclass(frozen=True, slots=True)
class UploadSummary:
    """Lightweight response view of a freshly built snapshot."""

    total_records: int
    agent_count: int
    assignments: Tuple[AssignmentSummary, ...] = field(default_factory=tuple)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "agentCount": self.agent_count,
            "distributions": [
                {"agentName": item.agent_name, "recordCount": item.record_count} for item in self.assignments
            ],
        }


@dataclass(frozen=True, slots=True)
class SnapshotSummary:
    """Listing view of a stored snapshot."""

    id: str
    file_name: str
    upload_date: datetime
    total_records: int
    agent_count: int


__all__ = [
    "Agent",
    "AgentAssignment",
    "AssignmentSummary",
    "DistributionSnapshot",
    "Record",
    "SnapshotSummary",
    "UploadSummary",
]
