# uploader/upload.py

"""
Upload pipeline: normalize a submission, build records, validate and move them.

Typical use::

    upload = Upload("files", policy, "/srv/uploads").ignition(submission)
    upload.process_all()
    upload.each_error(lambda r: print(r.source.original_filename, r.errors[0].message))
"""
from __future__ import annotations
from pathlib import Path
from typing import Any, Callable, List, Mapping, Optional, Set, Union
import logging

from .descriptors import build_record
from .errors import DestinationMissing, InvalidElement, Messages, MoveFailed
from .model import FailureKind, FailureReason, FileRecord, Policy
from .mover import move_record
from .naming import directory_lock
from .normalize import is_submitted, normalize_submission
from .validate import validate_record

logger = logging.getLogger(__name__)

Visitor = Callable[[FileRecord], Any]


class Upload:
    """One batch of files submitted under a single field id.

    The instance owns its records; visitors receive records one at a time
    and may annotate them, but never the list itself.
    """

    def __init__(
        self,
        field_id: str,
        policy: Optional[Policy] = None,
        destination: Union[str, Path, None] = None,
        messages: Union[Messages, Mapping[str, str], None] = None,
    ) -> None:
        self.messages = messages if isinstance(messages, Messages) else Messages(messages)
        if not field_id:
            raise InvalidElement(self.messages.format("invalid_file_element"))
        self.field_id = field_id
        self.policy = policy or Policy()
        self.destination = Path(destination) if destination else None
        self._records: List[FileRecord] = []

    def submitted(self, submission: Mapping[str, Any]) -> bool:
        """Return True if ``submission`` carries files for this field."""
        return is_submitted(submission, self.field_id)

    def ignition(self, submission: Mapping[str, Any]) -> "Upload":
        """Normalize ``submission`` and build one record per file.

        Raises:
            NoFilesSubmitted: If the field is absent or empty.
            DestinationMissing: If no destination directory was configured.
        """
        entries = normalize_submission(submission, self.field_id, self.messages)
        if self.destination is None:
            raise DestinationMissing(self.messages.format("destination_missing"))

        single = len(entries) == 1
        claimed: Set[Path] = set()
        records: List[FileRecord] = []
        with directory_lock(self.destination):
            for index, raw in enumerate(entries):
                record = build_record(
                    raw, self.policy, self.destination,
                    field_id=self.field_id, index=index, single=single, claimed=claimed,
                )
                claimed.add(record.destination.final_path)
                records.append(record)

        self._records = records
        logger.info("Field %s: %d file(s) ready for %s", self.field_id, len(records), self.destination)
        return self

    # --- per-record operations ----------------------------------------------------

    def validate(self, record: Optional[FileRecord]) -> bool:
        return validate_record(record, self.policy, self.messages)

    def process(self, record: FileRecord) -> bool:
        """Validate ``record`` and move it into the destination directory.

        Returns:
            bool: True once the record is stored, False if validation failed.

        Raises:
            MoveFailed: If the file could not be moved.
        """
        if record.succeeded:
            return True

        if not self.validate(record):
            record.succeeded = False
            return False

        return move_record(record, self.messages, self.policy.name_strategy)

    def process_all(self) -> bool:
        """Process every record; a failed move does not stop its siblings.

        Returns:
            bool: True if every record was stored.
        """
        for record in self._records:
            try:
                self.process(record)
            except MoveFailed as exc:
                reason = FailureReason(FailureKind.MOVE_FAILED, str(exc))
                if reason not in record.errors:
                    record.errors.append(reason)

        stored = len(self.successes())
        logger.info(
            "Field %s: %d stored | %d rejected | %d pending",
            self.field_id, stored, len(self.errors()), len(self.awaiting()),
        )
        return stored == len(self._records)

    # --- results ------------------------------------------------------------------

    def all(self) -> List[FileRecord]:
        return list(self._records)

    def successes(self) -> List[FileRecord]:
        return [r for r in self._records if r.is_valid and r.succeeded]

    def errors(self) -> List[FileRecord]:
        return [r for r in self._records if not r.is_valid and not r.succeeded]

    def awaiting(self) -> List[FileRecord]:
        return [r for r in self._records if not r.succeeded]

    def has_errors(self) -> bool:
        return bool(self.errors())

    def file_count(self) -> int:
        return len(self._records)

    # --- visitors -----------------------------------------------------------------

    @staticmethod
    def _visit(records: List[FileRecord], visitor: Optional[Visitor]) -> None:
        if not callable(visitor):
            return
        for record in records:
            visitor(record)

    def each(self, visitor: Visitor) -> None:
        self._visit(self._records, visitor)

    def each_success(self, visitor: Visitor) -> None:
        self._visit(self.successes(), visitor)

    def each_error(self, visitor: Visitor) -> None:
        self._visit(self.errors(), visitor)

    def each_awaiting(self, visitor: Visitor) -> None:
        self._visit(self.awaiting(), visitor)
