# main.py

"""
Orchestrator: read params (JSON + CLI), offer local files as an upload batch,
validate and store them, write CSV report.
"""
from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from uploader.config import load_config, load_policy, prepare_destination
from uploader.errors import Messages, UploadError
from uploader.model import FailureKind, Policy
from uploader.report import write_csv
from uploader.upload import Upload
from uploader.walk import build_submission, iter_files

logger = logging.getLogger("upload-intake")


def setup_logging(verbose: bool = False) -> None:
    """Send log records to stderr as ``[LEVEL] message``."""
    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments.

    Returns:
        argparse.Namespace: Parsed command-line arguments.
    """
    p = argparse.ArgumentParser(
        description="Validate files against size/type policy and store them under collision-free names."
    )
    p.add_argument("--input", type=str, help="Input file or directory (recursive).")
    p.add_argument("--dest", type=str, help="Destination directory (created if missing).")
    p.add_argument("--field", type=str, help="Upload field id (default: files).")
    p.add_argument("--report", type=str, help="Path to CSV report (default: report.csv).")
    p.add_argument("--config", type=str, help="Optional JSON config (flags override).")
    p.add_argument("--min-size", type=str, help="Minimum size, e.g. 1024 or 1kb.")
    p.add_argument("--max-size", type=str, help="Maximum size, e.g. 5mb.")
    p.add_argument("--allow-mime", type=str, help="Allowed mime types, comma separated, or '*'.")
    p.add_argument("--allow-ext", type=str, help="Allowed extensions, e.g. 'jpg|png'. Switches to extension matching.")
    p.add_argument("--force-ext", type=str, help="Store every file with this extension.")
    p.add_argument("--random-names", action="store_true", help="Store files under random 32-character names.")
    p.add_argument("--name", type=str, help="Name override for a single-file batch.")
    p.add_argument("--dry-run", action="store_true", help="Validate only; do not move anything.")
    p.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return p.parse_args(argv)


def _get_effective_config(args: argparse.Namespace) -> Tuple[Dict[str, Any], Path]:
    """Load CLI + JSON configuration, giving precedence to CLI flags."""
    script_dir = Path(__file__).parent
    default_config_path = script_dir / "params.json"
    config_path = Path(args.config) if args.config else default_config_path
    cfg = load_config(config_path if config_path.exists() else None)

    overrides = {
        "min_size": args.min_size,
        "max_size": args.max_size,
        "allowed_mime_types": args.allow_mime,
        "allowed_extensions": args.allow_ext,
        "force_extension": args.force_ext,
        "name": args.name,
        "generate_names": args.random_names or None,
    }
    cfg.update({k: v for k, v in overrides.items() if v is not None})
    return cfg, config_path


def _resolve_paths(args: argparse.Namespace, cfg: Dict[str, Any], config_path: Path) -> Tuple[Path, Path, Path]:
    """Resolve and validate input, destination and report paths."""
    raw_input = args.input or cfg.get("input", "")
    if not raw_input:
        logger.error("--input is required (or set 'input' in %s).", config_path.name)
        raise SystemExit(2)
    input_path = Path(raw_input)
    if not input_path.exists():
        logger.error("Input not found: %s", input_path)
        raise SystemExit(2)

    try:
        dest_path = prepare_destination(
            args.dest or cfg.get("destination"), messages=Messages(cfg.get("messages")),
        )
    except UploadError as exc:
        logger.error("%s", exc)
        raise SystemExit(2)

    report_path = Path(args.report or cfg.get("report", "report.csv"))
    return input_path, dest_path, report_path


def run_batch(upload: Upload, submission: Dict[str, Any], dry_run: bool) -> Upload:
    """Build the batch and either store it or only validate it."""
    upload.ignition(submission)
    if dry_run:
        upload.each(upload.validate)
    else:
        upload.process_all()
    return upload


def _print_summary(upload: Upload, report_path: Path, dry_run: bool) -> None:
    """Log summary information."""
    logger.info(
        "Done. Total: %d | Stored: %d | Rejected: %d | Pending: %d",
        upload.file_count(), len(upload.successes()), len(upload.errors()), len(upload.awaiting()),
    )
    logger.info("Report: %s", report_path.resolve())
    if dry_run:
        logger.info("Dry-run: nothing was moved. See 'status' and 'error' columns for results.")


def main(argv: Optional[List[str]] = None) -> int:
    """Main orchestration function.

    Returns:
        int: Exit code.
    """
    args = parse_args(argv)
    setup_logging(args.verbose)
    cfg, config_path = _get_effective_config(args)
    input_path, dest_path, report_path = _resolve_paths(args, cfg, config_path)

    try:
        policy: Policy = load_policy(cfg)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    field_id = args.field or cfg.get("field", "files")
    logger.info("Scanning: %s", input_path)
    submission = build_submission(field_id, iter_files(input_path))

    try:
        upload = run_batch(Upload(field_id, policy, dest_path, cfg.get("messages")), submission, args.dry_run)
    except UploadError as exc:
        logger.error("%s", exc)
        return 2

    write_csv(report_path, upload.all())
    _print_summary(upload, report_path, args.dry_run)

    if any(e.kind is FailureKind.MOVE_FAILED for r in upload.all() for e in r.errors):
        return 3
    if upload.has_errors():
        return 4
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
