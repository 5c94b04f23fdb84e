from __future__ import annotations

from dataclasses import dataclass, field

from .records import RawRow

"""Client-side row validation error.

Purely presentational: surfaced to the operator and written to the error log,
never submitted anywhere.
"""

__all__ = [
    "ValidationError",
]


@dataclass(frozen=True)
class ValidationError:
    """A row rejected before submission.

    Attributes:
        row: 1-based line number, header is line 1 so the first data row is 2
        message: Human readable reason (first failing rule)
        raw_row: Original cell values as read from the file
    """
    row: int
    message: str
    raw_row: RawRow = field(default_factory=dict)
