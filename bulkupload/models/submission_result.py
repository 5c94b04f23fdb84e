from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Server-side submission result models.

These are owned by the remote service: the client only decodes and renders
them. A ServerRowError and a client ValidationError may both say "Row N" but
mean different things (rejected after receiving vs. before sending).
"""

__all__ = [
    "ServerRowError",
    "BatchSubmissionResult",
    "as_int",
]


@dataclass(frozen=True)
class ServerRowError:
    row: int  # as reported by the server, -1 when absent
    message: str
    context: dict[str, Any] = field(default_factory=dict)  # data echoed back by the server


@dataclass(frozen=True)
class BatchSubmissionResult:
    success_count: int
    failed_count: int
    errors: list[ServerRowError] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return self.failed_count == 0

    @staticmethod
    def from_counts_payload(data: dict[str, Any]) -> BatchSubmissionResult:
        """Build from ``{successCount, failedCount, errors: [{row, error, ...}]}``.

        Each error entry keeps every key other than ``row``/``error`` as context,
        so both ``{row, error, data}`` (customers) and ``{row, name, error}``
        (streets) shapes are preserved.
        """
        errors: list[ServerRowError] = []
        for item in data.get("errors") or []:
            if not isinstance(item, dict):
                errors.append(ServerRowError(row=-1, message=str(item)))
                continue
            context = {k: v for k, v in item.items() if k not in ("row", "error")}
            if isinstance(context.get("data"), dict) and len(context) == 1:
                context = dict(context["data"])
            errors.append(
                ServerRowError(
                    row=as_int(item.get("row"), -1),
                    message=str(item.get("error") or item.get("message") or "Unknown error"),
                    context=context,
                )
            )
        return BatchSubmissionResult(
            success_count=as_int(data.get("successCount"), 0),
            failed_count=as_int(data.get("failedCount"), len(errors)),
            errors=errors,
        )


def as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
