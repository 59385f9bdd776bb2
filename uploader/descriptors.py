# uploader/descriptors.py

from __future__ import annotations
from pathlib import Path
from typing import AbstractSet, Tuple
import logging

from .filetype import sniff_mime
from .model import DestinationDescriptor, FileRecord, Policy, RawFileEntry, SourceDescriptor
from .naming import resolve_name

logger = logging.getLogger(__name__)


def split_filename(filename: str) -> Tuple[str, str]:
    """Split ``filename`` into (base name, lower-cased extension without dot)."""
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return filename, ""
    return stem, ext.lower()


def build_source(raw: RawFileEntry) -> SourceDescriptor:
    # host-supplied names may carry client path components
    base_name, extension = split_filename(Path(raw.declared_name).name)
    sniffed = sniff_mime(raw.temporary_path) or raw.declared_mime_type
    return SourceDescriptor(
        path=raw.temporary_path,
        original_filename=raw.declared_name,
        extension=extension,
        base_name=base_name,
        size_bytes=raw.size_bytes,
        declared_mime_type=raw.declared_mime_type,
        sniffed_mime_type=sniffed.strip().lower(),
        host_error_code=raw.host_error_code,
    )


def build_destination(
    source: SourceDescriptor,
    policy: Policy,
    directory: Path,
    single: bool,
    claimed: AbstractSet[Path] = frozenset(),
) -> DestinationDescriptor:
    base_name = policy.override_base_name if (single and policy.override_base_name) else source.base_name
    extension = policy.forced_extension or source.extension
    resolved = resolve_name(base_name, extension, directory, policy.name_strategy, claimed)
    return DestinationDescriptor(
        resolved_base_name=resolved,
        extension=extension,
        size_bytes=source.size_bytes,
        sniffed_mime_type=source.sniffed_mime_type,
        directory=directory,
    )


def build_record(
    raw: RawFileEntry,
    policy: Policy,
    destination: str | Path,
    *,
    field_id: str,
    index: int,
    single: bool,
    claimed: AbstractSet[Path] = frozenset(),
) -> FileRecord:
    """Build the source/destination pair for one normalized upload.

    Args:
        raw (RawFileEntry): The normalized host entry.
        policy (Policy): Active policy (naming, forced extension, name override).
        destination (str | Path): Destination directory.
        field_id (str): Upload field the entry came from.
        index (int): Position of the entry in the batch.
        single (bool): Whether the batch holds exactly one file.
        claimed (AbstractSet[Path]): Destination paths already given to
            earlier records of the batch.

    Returns:
        FileRecord: A fresh, not yet validated record.
    """
    source = build_source(raw)
    dest = build_destination(source, policy, Path(destination), single, claimed)
    logger.debug(
        "Record %s[%d]: %s (%s, %d bytes) -> %s",
        field_id, index, source.original_filename, source.sniffed_mime_type,
        source.size_bytes, dest.final_path,
    )
    return FileRecord(field_id=field_id, index=index, source=source, destination=dest)
