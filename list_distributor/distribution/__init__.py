"""Partitioning, snapshot assembly and the upload workflow."""

from .partitioner import partition
from .service import DistributionService
from .snapshot import build_snapshot, summarize

__all__ = ["DistributionService", "build_snapshot", "partition", "summarize"]
