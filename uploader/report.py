# uploader/report.py

from __future__ import annotations
import csv
from pathlib import Path
from typing import Iterable, List

from .model import FailureKind, FileRecord, ReportRow

HEADER = [
    "field_id", "index", "source_name", "source_path", "size_bytes", "extension",
    "declared_mime", "sniffed_mime", "destination", "is_valid", "succeeded", "status", "error",
]


def record_status(record: FileRecord) -> str:
    """Classify a record as stored, rejected, failed or pending."""
    if record.succeeded:
        return "stored"
    if not record.is_valid and record.errors:
        return "rejected"
    if any(e.kind is FailureKind.MOVE_FAILED for e in record.errors):
        return "failed"
    return "pending"


def to_row(record: FileRecord) -> ReportRow:
    return ReportRow(
        field_id=record.field_id,
        index=record.index,
        source_name=record.source.original_filename,
        source_path=record.source.path,
        size_bytes=record.source.size_bytes,
        extension=record.source.extension,
        declared_mime=record.source.declared_mime_type,
        sniffed_mime=record.source.sniffed_mime_type,
        destination=str(record.destination.final_path),
        is_valid=record.is_valid,
        succeeded=record.succeeded,
        status=record_status(record),
        error="; ".join(e.message for e in record.errors),
    )


def write_csv(out_path: Path, records: Iterable[FileRecord]) -> List[ReportRow]:
    """Write one CSV row per upload record.

    Args:
        out_path (Path): Destination CSV file path.
        records (Iterable[FileRecord]): Records of a processed batch.

    Returns:
        List[ReportRow]: The rows that were written.
    """
    rows = [to_row(r) for r in records]
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(HEADER)
        for r in rows:
            writer.writerow([
                r.field_id,
                r.index,
                r.source_name,
                r.source_path,
                r.size_bytes,
                r.extension,
                r.declared_mime,
                r.sniffed_mime,
                r.destination,
                str(r.is_valid).lower(),
                str(r.succeeded).lower(),
                r.status,
                r.error,
            ])
    return rows
