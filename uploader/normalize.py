# uploader/normalize.py

"""
Turn a host's field-indexed upload submission into one record per file.

Hosts report multi-file fields (``name="files[]"``) as a structure of arrays:
``{"name": [...], "type": [...], "tmp_name": [...], "error": [...], "size": [...]}``,
while a single-file field (``name="file"``) carries plain scalars.
"""
from __future__ import annotations
from typing import Any, List, Mapping, Optional, Sequence

from .errors import Messages, NoFilesSubmitted
from .model import RawFileEntry


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _pick(field: Mapping[str, Any], attr: str, index: int) -> Any:
    value = field.get(attr)
    if _is_sequence(value):
        return value[index] if index < len(value) else None
    return value if index == 0 else None


def _as_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _entry(field: Mapping[str, Any], index: int) -> RawFileEntry:
    return RawFileEntry(
        declared_name=str(_pick(field, "name", index) or ""),
        declared_mime_type=str(_pick(field, "type", index) or ""),
        temporary_path=str(_pick(field, "tmp_name", index) or ""),
        host_error_code=_as_int(_pick(field, "error", index)),
        size_bytes=_as_int(_pick(field, "size", index)),
    )


def is_submitted(submission: Mapping[str, Any], field_id: str) -> bool:
    """Return True if ``field_id`` carries at least one named file."""
    field = (submission or {}).get(field_id)
    if not field:
        return False
    names = field.get("name")
    if _is_sequence(names):
        return any(names)
    return bool(names)


def normalize_submission(
    submission: Mapping[str, Any],
    field_id: str,
    messages: Optional[Messages] = None,
) -> List[RawFileEntry]:
    """Normalize the submission for ``field_id`` into a list of RawFileEntry.

    Args:
        submission (Mapping[str, Any]): Field id -> field-indexed attributes.
        field_id (str): The upload field to read.
        messages (Messages | None): Message templates for raised errors.

    Returns:
        List[RawFileEntry]: One entry per non-empty file slot, in slot order.

    Raises:
        NoFilesSubmitted: If the field is absent or holds no named file.
    """
    messages = messages or Messages()
    if field_id not in (submission or {}):
        raise NoFilesSubmitted(messages.format("file_input_missing", field_id), field_id=field_id)
    if not is_submitted(submission, field_id):
        raise NoFilesSubmitted(messages.format("nothing_uploaded"), field_id=field_id)

    field = submission[field_id]
    names = field["name"]
    if not _is_sequence(names):
        return [_entry(field, 0)]

    return [_entry(field, i) for i, name in enumerate(names) if name]
