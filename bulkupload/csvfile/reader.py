from __future__ import annotations

import io
import warnings
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from ..errors import ParseError
from ..models.records import RawRow

"""CSV reader for bulk upload sources.

The first line is the header; every following non-blank line becomes a RawRow
keyed by the (trimmed) header names. All cells are read as text so values such
as phone numbers keep their leading zeros, and pandas' default NA conversion is
disabled so literal strings like "NA" survive untouched.
"""

__all__ = [
    "SourceData",
    "ACCEPTED_SUFFIXES",
    "read_csv_file",
    "read_csv_text",
    "normalize_frame",
]

ACCEPTED_SUFFIXES = (".csv",)


@dataclass
class SourceData:
    name: str
    columns: list[str]
    rows: list[RawRow]  # blank rows already dropped, file order kept


def read_csv_file(path: Path) -> SourceData:
    """Read a CSV upload from disk.

    Raises:
        ParseError: wrong extension, unreadable file, bad encoding, or malformed CSV
    """
    if path.suffix.lower() not in ACCEPTED_SUFFIXES:
        raise ParseError(f"Please upload a CSV file (got {path.name})")
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ParseError(f"Failed to read file {path}: {e}") from e
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(
            "File encoding error. Please ensure the file is UTF-8 encoded"
        ) from e
    return read_csv_text(text, name=path.name)


def read_csv_text(text: str, name: str = "<text>") -> SourceData:
    """Parse CSV text whose first line is the header.

    Cells beyond the header width are dropped (spreadsheet exports often end
    lines with a trailing comma), so values always stay under their own header.
    """
    if not text.strip():
        raise ParseError(f"File is empty: {name}")
    options = {
        "dtype": str,
        "keep_default_na": False,
        "skip_blank_lines": True,
        "engine": "python",
        # never promote a surplus leading column to the index
        "index_col": False,
    }
    try:
        width = len(pd.read_csv(io.StringIO(text), nrows=0, **options).columns)
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(text),
                on_bad_lines=lambda bad: bad[:width],
                **options,
            )
    except pd.errors.EmptyDataError as e:
        raise ParseError(f"File is empty: {name}") from e
    except pd.errors.ParserError as e:
        raise ParseError(f"Failed to parse CSV file {name}. Please check the format: {e}") from e
    return normalize_frame(df, name)


def normalize_frame(df: pd.DataFrame, name: str) -> SourceData:
    columns = [str(c).strip() for c in df.columns]
    rows: list[RawRow] = []
    for raw in df.itertuples(index=False, name=None):
        row: RawRow = {}
        for col, val in zip(columns, raw, strict=False):
            # short lines leave trailing cells as NaN
            row[col] = "" if pd.isna(val) else str(val)
        if all(not v.strip() for v in row.values()):
            continue
        rows.append(row)
    return SourceData(name=name, columns=columns, rows=rows)
