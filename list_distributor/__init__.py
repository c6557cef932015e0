"""Top-level package for the contact list distributor."""

from . import models  # noqa: F401
from .distribution import DistributionService, build_snapshot, partition, summarize
from .errors import (
    DistributionError,
    EmptyInputError,
    EmptyRosterError,
    InvariantViolation,
    ParseError,
)
from .models import (
    Agent,
    AgentAssignment,
    DistributionSnapshot,
    Record,
    SnapshotSummary,
    UploadSummary,
)

__all__ = [
    "Agent",
    "AgentAssignment",
    "DistributionError",
    "DistributionService",
    "DistributionSnapshot",
    "EmptyInputError",
    "EmptyRosterError",
    "InvariantViolation",
    "ParseError",
    "Record",
    "SnapshotSummary",
    "UploadSummary",
    "build_snapshot",
    "partition",
    "summarize",
    "ingestion",
    "distribution",
]
