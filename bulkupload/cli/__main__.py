from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import pandas as pd
from dotenv import load_dotenv

from bulkupload.api.client import ApiClient
from bulkupload.config.loader import DEFAULT_CONFIG_PATH, ConfigError, UploadConfig, load_config
from bulkupload.csvfile.template import write_failed_rows, write_template
from bulkupload.errors import UploadError
from bulkupload.logging.error_log import ErrorLogBuffer
from bulkupload.logging.init import log_summary, set_debug, setup_logging
from bulkupload.models.upload_state import UploadState
from bulkupload.services.controller import UploadController
from bulkupload.services.summary import render_summary_line
from bulkupload.validation.profiles import PROFILES, get_profile

"""CLI entrypoint.

Sub-commands:
- template <kind>        write the CSV template for an upload kind
- validate <kind> FILE   parse + validate + preview (never submits)
- submit <kind> FILE     parse + validate + preview, confirm, submit
- collections            list billing collections
"""

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PARTIAL_FAILURE = 2
EXIT_VALIDATION_FAILED = 3
EXIT_DECLINED = 4

DEFAULT_PREVIEW_ROWS = 20


def _load_env_file(path: Path, override: bool = True) -> None:
    """Load .env; its values win over variables already in the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="bulkupload", description="CSV bulk upload for the PSP platform")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="Config YAML path")
    sub = p.add_subparsers(dest="command", required=True)

    kinds = sorted(PROFILES)

    t = sub.add_parser("template", help="Write the CSV template for an upload kind")
    t.add_argument("kind", choices=kinds)
    t.add_argument("-o", "--output", type=Path, default=None, help="Output path")

    for name, help_text in (
        ("validate", "Validate a CSV file and show the preview"),
        ("submit", "Validate, confirm and submit a CSV file"),
    ):
        s = sub.add_parser(name, help=help_text)
        s.add_argument("kind", choices=kinds)
        s.add_argument("file", type=Path)
        s.add_argument("--preview-rows", type=int, default=DEFAULT_PREVIEW_ROWS,
                       help="Number of rows shown in the preview (0 = all)")
        if name == "submit":
            s.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
            s.add_argument("--ward-id", default=None, help="Ward id (required for streets)")
            s.add_argument("--failed-out", type=Path, default=None,
                           help="Write server-rejected rows to this CSV")

    sub.add_parser("collections", help="List billing collections")
    return p.parse_args(argv)


def _build_client(cfg: UploadConfig) -> ApiClient:
    return ApiClient(
        cfg.api.base_url,
        cfg.api.access_token,
        timeout=cfg.api.timeout_seconds,
    )


def _render_table(rows: list[dict[str, Any]], limit: int) -> str:
    df = pd.DataFrame(rows)
    if limit and len(df) > limit:
        return df.head(limit).to_string(index=False) + f"\n... ({len(df) - limit} more)"
    return df.to_string(index=False)


def _print_validation_errors(controller: UploadController) -> None:
    rows = [{"row": e.row, "error": e.message, **e.raw_row} for e in controller.errors]
    print(_render_table(rows, 0))


def _print_preview(controller: UploadController, limit: int) -> None:
    rows = [r.to_payload() for r in controller.records]
    print(f"PREVIEW {controller.profile.name} ({len(rows)} record(s))")
    print(_render_table(rows, limit))


def _confirm(count: int, kind: str) -> bool:
    try:
        answer = input(f"Submit {count} {kind} record(s)? [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _finish(controller: UploadController, code: int, logger) -> int:
    path = controller.error_log.flush()
    if path is not None:
        logger.info(f"error log written: {path}")
    # log_summary adds the "SUMMARY " label itself
    log_summary(render_summary_line(controller)[len("SUMMARY "):])
    return code


def _run_upload(args: argparse.Namespace, cfg: UploadConfig, logger) -> int:
    profile = get_profile(args.kind)
    submitting = args.command == "submit"

    extra: dict[str, Any] = {}
    if submitting and profile.requires_ward:
        if not args.ward_id:
            logger.error(f"--ward-id is required for {profile.name}")
            return EXIT_FATAL
        extra["wardId"] = args.ward_id

    client = _build_client(cfg) if submitting else None
    if client is not None and not cfg.api.access_token:
        logger.warning("no access token configured (BULKUPLOAD_ACCESS_TOKEN)")

    controller = UploadController(
        profile,
        client,
        endpoint=cfg.endpoint_for(profile.name, profile.endpoint),
        extra=extra,
        error_log=ErrorLogBuffer(Path(cfg.logs_directory)),
        poll_interval=cfg.polling.interval_seconds,
        max_polls=cfg.polling.max_polls,
    )
    try:
        state = controller.load(args.file)
        if state is UploadState.PARSE_FAILED:
            return _finish(controller, EXIT_FATAL, logger)
        if state is UploadState.VALIDATION_FAILED:
            _print_validation_errors(controller)
            return _finish(controller, EXIT_VALIDATION_FAILED, logger)

        _print_preview(controller, args.preview_rows)
        if not submitting:
            return _finish(controller, EXIT_SUCCESS_ALL, logger)

        if not args.yes and not _confirm(len(controller.records), profile.name):
            logger.info("submission declined; nothing was sent")
            code = _finish(controller, EXIT_DECLINED, logger)
            controller.cancel()
            return code

        state = controller.confirm()
        if state is UploadState.SUBMIT_FAILED:
            return _finish(controller, EXIT_FATAL, logger)
        if state is UploadState.IDLE:
            return _finish(controller, EXIT_DECLINED, logger)

        result = controller.result
        if result is None:
            logger.error("submit: no result recorded for a successful submission")
            return _finish(controller, EXIT_FATAL, logger)
        if result.errors:
            print(_render_table(
                [{"row": e.row, "error": e.message, **e.context} for e in result.errors], 0
            ))
            if args.failed_out is not None:
                written = write_failed_rows(result, args.failed_out)
                logger.info(f"failed rows written: {written}")
        code = EXIT_SUCCESS_ALL if result.all_succeeded else EXIT_PARTIAL_FAILURE
        return _finish(controller, code, logger)
    finally:
        if client is not None:
            client.close()


def _run_collections(cfg: UploadConfig, logger) -> int:
    with _build_client(cfg) as client:
        try:
            envelope = client.list_collections()
        except UploadError as e:
            logger.error(f"collections: {e}")
            return EXIT_FATAL
    logger.debug(f"collections envelope shape={envelope.shape.value}")
    if not envelope.items:
        logger.info("no collections found")
        return EXIT_SUCCESS_ALL
    print(_render_table([c if isinstance(c, dict) else {"value": c} for c in envelope.items], 0))
    logger.info(f"{len(envelope.items)} collection(s)")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest flags)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)

    if args.debug:
        set_debug(logger)

    if args.command == "template":
        profile = get_profile(args.kind)
        path = write_template(profile, args.output)
        logger.info(f"template written: {path}")
        return EXIT_SUCCESS_ALL

    _load_env_file(Path(".env"), override=True)
    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.command == "collections":
        return _run_collections(cfg, logger)
    return _run_upload(args, cfg, logger)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
