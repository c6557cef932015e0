"""Utilities for reading, normalising and exporting contact lists."""

from .exporters import export_snapshot, snapshot_to_dataframe
from .loaders import iter_csv_rows, load_records, load_rows, read_workbook_rows, validate_upload
from .normalizer import normalize_row, normalize_rows

__all__ = [
    "export_snapshot",
    "iter_csv_rows",
    "load_records",
    "load_rows",
    "normalize_row",
    "normalize_rows",
    "read_workbook_rows",
    "snapshot_to_dataframe",
    "validate_upload",
]
