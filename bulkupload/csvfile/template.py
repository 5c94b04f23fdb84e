from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from ..models.submission_result import BatchSubmissionResult
from ..validation.profiles import RecordProfile

"""CSV writers: downloadable upload templates and server-rejected rows."""

__all__ = [
    "template_filename",
    "render_template",
    "write_template",
    "write_failed_rows",
]


def template_filename(profile: RecordProfile) -> str:
    singular = profile.name[:-1] if profile.name.endswith("s") else profile.name
    return f"{singular}_upload_template.csv"


def render_template(profile: RecordProfile) -> str:
    """Header line plus the profile's example rows, in template column order."""
    df = pd.DataFrame(list(profile.sample_rows), columns=list(profile.columns))
    return df.to_csv(index=False, lineterminator="\n")


def write_template(profile: RecordProfile, path: Path | None = None) -> Path:
    target = path if path is not None else Path(template_filename(profile))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(render_template(profile), encoding="utf-8")
    return target


def write_failed_rows(result: BatchSubmissionResult, path: Path) -> Path | None:
    """Write rows rejected by the server so they can be fixed and re-uploaded.

    Columns: ``row``, ``error`` followed by every context key the server echoed
    back, in first-seen order. Returns None when there is nothing to write.
    """
    if not result.errors:
        return None
    extra: list[str] = []
    records: list[dict[str, Any]] = []
    for err in result.errors:
        for key in err.context:
            if key not in extra and key not in ("row", "error"):
                extra.append(key)
        records.append({"row": err.row, "error": err.message, **err.context})
    df = pd.DataFrame(records, columns=["row", "error", *extra])
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, lineterminator="\n")
    return path
