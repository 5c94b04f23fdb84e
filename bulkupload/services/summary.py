from __future__ import annotations

from .controller import UploadController

"""SUMMARY line rendering.

Format:
SUMMARY file={name} state={state} rows={rows} valid={valid} invalid={invalid}
submitted={submitted} success={success} failed={failed} elapsed_sec={elapsed}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # avoid scientific notation for tiny durations
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return f"{value:.3f}".rstrip("0").rstrip(".")


def render_summary_line(controller: UploadController) -> str:
    """Render the SUMMARY line for one upload run.

    ``valid`` counts rows that passed client validation; when any row failed,
    nothing is submitted so ``submitted`` is 0.
    """
    invalid = len(controller.errors)
    valid = controller.total_rows - invalid
    result = controller.result
    submitted = (result.success_count + result.failed_count) if result is not None else 0
    success = result.success_count if result is not None else 0
    failed = result.failed_count if result is not None else 0
    return (
        f"SUMMARY file={controller.source_name} "
        f"state={controller.state.value} "
        f"rows={controller.total_rows} "
        f"valid={valid} "
        f"invalid={invalid} "
        f"submitted={submitted} "
        f"success={success} "
        f"failed={failed} "
        f"elapsed_sec={_format_seconds(controller.elapsed_seconds)}"
    )
