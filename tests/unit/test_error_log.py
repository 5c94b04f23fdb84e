from __future__ import annotations

import json
import re
from pathlib import Path

from bulkupload.logging.error_log import ErrorLogBuffer
from bulkupload.models.error_record import CLIENT_VALIDATION, PARSE_ERROR, ErrorRecord


def test_error_record_timestamp_is_utc_z():
    rec = ErrorRecord.create("customers.csv", 3, CLIENT_VALIDATION, "Phone number is required")
    assert rec.timestamp.endswith("Z")
    assert "+00:00" not in rec.timestamp


def test_error_record_json_keeps_non_ascii():
    rec = ErrorRecord.create("clients.csv", 2, CLIENT_VALIDATION, "Invalid LGA: Ìbàdàn for state Oyo")
    line = rec.to_json_line()
    assert "Ìbàdàn" in line
    assert set(json.loads(line)) == {"timestamp", "file", "row", "error_type", "message"}


def test_flush_without_records_creates_nothing(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    assert buf.flush() is None
    assert not (tmp_path / "logs").exists()


def test_flush_writes_json_lines(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path / "logs")
    buf.append(ErrorRecord.create("a.csv", -1, PARSE_ERROR, "File is empty: a.csv"))
    buf.extend([
        ErrorRecord.create("a.csv", 2, CLIENT_VALIDATION, "Full name is required"),
        ErrorRecord.create("a.csv", 4, CLIENT_VALIDATION, "Phone number is required"),
    ])

    path = buf.flush()

    assert path is not None
    assert re.fullmatch(r"errors-\d{8}-\d{6}\.log", path.name)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(l)["row"] for l in lines] == [-1, 2, 4]
    assert len(buf) == 0


def test_second_flush_appends_to_same_file(tmp_path: Path):
    buf = ErrorLogBuffer(tmp_path)
    buf.append(ErrorRecord.create("a.csv", 2, CLIENT_VALIDATION, "x"))
    first = buf.flush()
    buf.append(ErrorRecord.create("a.csv", 3, CLIENT_VALIDATION, "y"))
    second = buf.flush()
    assert first == second
    assert len(first.read_text(encoding="utf-8").splitlines()) == 2
