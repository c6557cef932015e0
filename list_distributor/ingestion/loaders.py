"""Utilities for loading contact rows from delimited text and workbooks."""
from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import pandas as pd

from ..errors import FileTooLargeError, ParseError, UnsupportedFileTypeError
from ..models import Record
from .normalizer import normalize_rows

LOGGER = logging.getLogger(__name__)

PathLike = Union[str, Path]
RowLike = Dict[str, Any]

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024

_DELIMITED_SUFFIXES = {".csv", ".tsv"}
_WORKBOOK_SUFFIXES = {".xlsx", ".xlsm", ".xls"}
SUPPORTED_SUFFIXES = frozenset(_DELIMITED_SUFFIXES | _WORKBOOK_SUFFIXES)


def validate_upload(path: PathLike, *, max_bytes: Optional[int] = DEFAULT_MAX_UPLOAD_BYTES) -> Path:
    """Check that ``path`` exists, has a supported extension and fits the size limit."""

    file_path = Path(path)
    if file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise UnsupportedFileTypeError(
            f"Unsupported file extension '{file_path.suffix}'. Supported extensions: {sorted(SUPPORTED_SUFFIXES)}"
        )
    if not file_path.exists():
        raise FileNotFoundError(file_path)
    if max_bytes is not None:
        size = file_path.stat().st_size
        if size > max_bytes:
            raise FileTooLargeError(f"'{file_path.name}' is {size} bytes; the limit is {max_bytes} bytes")
    return file_path


def load_rows(path: PathLike) -> List[RowLike]:
    """Read every raw row from a CSV/TSV file or the first sheet of a workbook."""

    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix in _DELIMITED_SUFFIXES:
        return list(iter_csv_rows(file_path))
    if suffix in _WORKBOOK_SUFFIXES:
        return read_workbook_rows(file_path)
    raise UnsupportedFileTypeError(f"Unsupported file extension: {file_path.suffix}")


def load_records(path: PathLike) -> List[Record]:
    """Load and normalise the contact records stored in ``path``."""

    rows = load_rows(path)
    records = normalize_rows(rows)
    LOGGER.debug("Normalised %s of %s rows from %s", len(records), len(rows), path)
    return records


def iter_csv_rows(path: PathLike) -> Iterator[RowLike]:
    """Stream rows from delimited text, keyed by the header line.

    Rows are yielded as soon as they are read, so a caller consuming the
    iterator directly keeps the rows it already received when a later line
    fails to decode. The failure itself is raised as :class:`ParseError`.
    """

    file_path = Path(path)
    delimiter = "\t" if file_path.suffix.lower() == ".tsv" else ","
    line_number = 0
    try:
        with file_path.open(newline="", encoding="utf-8-sig") as handle:
            reader = csv.DictReader(handle, delimiter=delimiter, strict=True)
            for row in reader:
                line_number = reader.line_num
                yield row
    except (csv.Error, UnicodeDecodeError) as exc:
        raise ParseError(f"Could not parse '{file_path.name}' after line {line_number}: {exc}") from exc


def read_workbook_rows(path: PathLike) -> List[RowLike]:
    """Read the first sheet of a workbook into header-keyed rows.

    Empty cells become ``None``. A corrupt workbook raises :class:`ParseError`
    and no rows are returned.
    """

    file_path = Path(path)
    engine = "openpyxl" if file_path.suffix.lower() in {".xlsx", ".xlsm"} else None
    try:
        frame = pd.read_excel(file_path, sheet_name=0, dtype=object, engine=engine)
    except ImportError as exc:
        raise ParseError(
            f"Reading '{file_path.name}' requires an Excel engine that is not installed "
            f"(install the 'xls' extra for .xls files): {exc}"
        ) from exc
    except FileNotFoundError:
        raise
    except Exception as exc:
        raise ParseError(f"Could not read workbook '{file_path.name}': {exc}") from exc

    frame = frame.astype(object).where(frame.notna(), None)
    frame.columns = [str(column).strip() for column in frame.columns]
    LOGGER.debug("Read %s rows from the first sheet of %s", len(frame), file_path)
    return frame.to_dict(orient="records")


__all__ = [
    "DEFAULT_MAX_UPLOAD_BYTES",
    "SUPPORTED_SUFFIXES",
    "iter_csv_rows",
    "load_records",
    "load_rows",
    "read_workbook_rows",
    "validate_upload",
]
