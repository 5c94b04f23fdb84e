from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

Supports row=-1 as a sentinel for file-level errors (parse failure, transport
failure) where no specific row applies. The key set is fixed: serialization
never adds keys beyond the dataclass fields.
"""

__all__ = [
    "ErrorRecord",
    "PARSE_ERROR",
    "CLIENT_VALIDATION",
    "SERVER_REJECTED",
    "TRANSPORT_ERROR",
]

PARSE_ERROR = "PARSE_ERROR"
CLIENT_VALIDATION = "CLIENT_VALIDATION"
SERVER_REJECTED = "SERVER_REJECTED"
TRANSPORT_ERROR = "TRANSPORT_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: CSV filename being uploaded
        row: Row number (header = 1). Use -1 for file-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Validation, server or transport message
    """
    timestamp: str  # ISO8601 UTC
    file: str
    row: int
    error_type: str  # UPPER_SNAKE
    message: str

    @staticmethod
    def create(file: str, row: int, error_type: str, message: str) -> ErrorRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
