"""Export utilities for distribution snapshots."""
from __future__ import annotations

import re
from pathlib import Path
from typing import List, MutableMapping, Optional, Set, Union

import pandas as pd

from ..errors import UnsupportedFileTypeError
from ..models import DistributionSnapshot

PathLike = Union[str, Path]

RECORD_COLUMNS = ["agent_id", "agent_name", "firstName", "phone", "notes"]
SUMMARY_SHEET = "Summary"

_INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")
_MAX_SHEET_TITLE = 31


def export_snapshot(
    snapshot: DistributionSnapshot,
    path: PathLike,
    *,
    exporter_kwargs: Optional[MutableMapping[str, object]] = None,
) -> Path:
    """Write a snapshot to a CSV/TSV table or an Excel workbook.

    Delimited output holds one row per record. Workbooks get a summary sheet
    followed by one sheet per agent, in roster order.
    """

    output_path = Path(path)
    exporter_kwargs = dict(exporter_kwargs or {})
    suffix = output_path.suffix.lower()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if suffix in {".csv", ".tsv"}:
        if suffix == ".tsv":
            exporter_kwargs.setdefault("sep", "\t")
        snapshot_to_dataframe(snapshot).to_csv(output_path, index=False, **exporter_kwargs)
        return output_path

    if suffix in {".xlsx", ".xlsm"}:
        engine = exporter_kwargs.pop("engine", None) or "openpyxl"
        with pd.ExcelWriter(output_path, engine=engine, **exporter_kwargs) as writer:
            summary_to_dataframe(snapshot).to_excel(writer, sheet_name=SUMMARY_SHEET, index=False)
            used: Set[str] = {SUMMARY_SHEET.lower()}
            for assignment in snapshot.assignments:
                frame = pd.DataFrame(
                    [record.to_dict() for record in assignment.records],
                    columns=RECORD_COLUMNS[2:],
                )
                frame.to_excel(writer, sheet_name=_sheet_title(assignment.agent_name, used), index=False)
        return output_path

    raise UnsupportedFileTypeError(f"Unsupported export file extension: {suffix}")


def snapshot_to_dataframe(snapshot: DistributionSnapshot) -> pd.DataFrame:
    """Flatten a snapshot into one row per record, in distribution order."""

    rows: List[MutableMapping[str, object]] = []
    for assignment in snapshot.assignments:
        for record in assignment.records:
            row: MutableMapping[str, object] = {
                "agent_id": assignment.agent_id,
                "agent_name": assignment.agent_name,
            }
            row.update(record.to_dict())
            rows.append(row)
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def summary_to_dataframe(snapshot: DistributionSnapshot) -> pd.DataFrame:
    """Per-agent record counts for a snapshot."""

    return pd.DataFrame(
        [
            {
                "agent_id": assignment.agent_id,
                "agent_name": assignment.agent_name,
                "record_count": assignment.record_count,
            }
            for assignment in snapshot.assignments
        ],
        columns=["agent_id", "agent_name", "record_count"],
    )


def _sheet_title(name: str, used: Set[str]) -> str:
    base = _INVALID_SHEET_CHARS.sub("_", name).strip().strip("'") or "Agent"
    base = base[:_MAX_SHEET_TITLE]
    title = base
    counter = 2
    while title.lower() in used:
        suffix = f" ({counter})"
        title = base[: _MAX_SHEET_TITLE - len(suffix)] + suffix
        counter += 1
    used.add(title.lower())
    return title


__all__ = ["export_snapshot", "snapshot_to_dataframe", "summary_to_dataframe"]
