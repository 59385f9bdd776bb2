# uploader/validate.py

from __future__ import annotations
from typing import Optional
import logging

from .errors import Messages
from .model import WILDCARD, FailureKind, FailureReason, FileRecord, MatchMode, Policy

logger = logging.getLogger(__name__)


def _reject(record: FileRecord, reason: FailureReason) -> bool:
    record.is_valid = False
    if reason not in record.errors:
        record.errors.append(reason)
    logger.info("Rejected %s: %s", record.source.original_filename if record.source else record.field_id, reason.message)
    return False


def validate_record(
    record: Optional[FileRecord],
    policy: Policy,
    messages: Optional[Messages] = None,
) -> bool:
    """Check a record against the size range and the type allow-list.

    Checks run in order (element, min size, max size, type) and stop at the
    first failure, which is appended to ``record.errors``.

    Returns:
        bool: True if the record may be moved.
    """
    messages = messages or Messages()

    if record is None:
        return False

    if record.source is None or record.destination is None:
        return _reject(record, FailureReason(
            FailureKind.INVALID_ELEMENT,
            messages.format("invalid_file_element", record.field_id),
        ))

    size = record.source.size_bytes
    if size < policy.min_size_bytes:
        return _reject(record, FailureReason(FailureKind.TOO_SMALL, messages.format("too_small")))

    if size > policy.max_size_bytes:
        return _reject(record, FailureReason(FailureKind.TOO_LARGE, messages.format("too_large")))

    if policy.match_mode is MatchMode.MIME:
        allowed = policy.allowed_mime_types
        mime = record.source.sniffed_mime_type
        if allowed != WILDCARD and mime not in allowed:
            listed = tuple(sorted(allowed))
            return _reject(record, FailureReason(
                FailureKind.INVALID_MIME_TYPE,
                messages.format("invalid_mime", mime, ", ".join(listed)),
                value=mime,
                allowed=listed,
            ))
    else:
        allowed = policy.allowed_extensions
        ext = record.source.extension
        if allowed != WILDCARD and ext not in allowed:
            listed = tuple(sorted(allowed))
            return _reject(record, FailureReason(
                FailureKind.INVALID_EXTENSION,
                messages.format("invalid_ext", ext, ", ".join(listed)),
                value=ext,
                allowed=listed,
            ))

    record.is_valid = True
    record.errors.clear()
    return True
