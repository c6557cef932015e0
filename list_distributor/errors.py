"""Exception types raised by the distribution engine and its collaborators."""
from __future__ import annotations


class DistributionError(Exception):
    """Base class for failures reported while distributing an uploaded list."""


class EmptyRosterError(DistributionError):
    """Raised when no active agents are available to receive records."""


class EmptyInputError(DistributionError):
    """Raised when normalisation yields zero usable records."""


class ParseError(DistributionError):
    """Raised when a delimited-text file or workbook cannot be decoded."""


class InvariantViolation(DistributionError):
    """Raised when a partition does not account for every record and agent."""


class UnsupportedFileTypeError(DistributionError, ValueError):
    """Raised when an unsupported file format is passed to the loader."""


class FileTooLargeError(DistributionError):
    """Raised when an upload exceeds the configured size limit."""


class SnapshotNotFoundError(DistributionError, KeyError):
    """Raised when a store has no snapshot with the requested identifier."""

    def __str__(self) -> str:  # KeyError quotes its argument
        return str(self.args[0]) if self.args else ""


class DuplicateSnapshotError(DistributionError):
    """Raised when a snapshot identifier is saved twice."""


class InvalidSnapshotIdError(DistributionError, ValueError):
    """Raised when a snapshot identifier cannot be stored under its own name."""


__all__ = [
    "DistributionError",
    "DuplicateSnapshotError",
    "EmptyInputError",
    "EmptyRosterError",
    "FileTooLargeError",
    "InvalidSnapshotIdError",
    "InvariantViolation",
    "ParseError",
    "SnapshotNotFoundError",
    "UnsupportedFileTypeError",
]
