# uploader/model.py

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import FrozenSet, List, Optional, Tuple, Union

WILDCARD = "*"

AllowList = Union[str, FrozenSet[str]]  # WILDCARD or an explicit lower-cased set

DEFAULT_MAX_SIZE = 5242880  # 5 MB


class MatchMode(Enum):
    """How uploads are matched against the type allow-list."""
    MIME = "mime"
    EXTENSION = "extension"


class NameStrategy(Enum):
    """How destination names are produced."""
    SEQUENTIAL = "sequential"
    RANDOM = "random"


class FailureKind(Enum):
    INVALID_ELEMENT = "invalid_element"
    TOO_SMALL = "too_small"
    TOO_LARGE = "too_large"
    INVALID_MIME_TYPE = "invalid_mime_type"
    INVALID_EXTENSION = "invalid_extension"
    MOVE_FAILED = "move_failed"


@dataclass(frozen=True)
class FailureReason:
    """Why a record was rejected or could not be stored."""
    kind: FailureKind
    message: str
    value: Optional[str] = None          # offending mime type / extension
    allowed: Tuple[str, ...] = ()        # allow-list at the time of the check


@dataclass(frozen=True)
class RawFileEntry:
    """One submitted file as reported by the host, before classification."""
    declared_name: str
    declared_mime_type: str
    temporary_path: str
    host_error_code: int
    size_bytes: int


@dataclass(frozen=True)
class SourceDescriptor:
    path: str
    original_filename: str
    extension: str            # lower-cased, no dot
    base_name: str            # filename minus ".<extension>"
    size_bytes: int
    declared_mime_type: str
    sniffed_mime_type: str    # content-based, falls back to the declared type
    host_error_code: int


@dataclass(frozen=True)
class DestinationDescriptor:
    resolved_base_name: str
    extension: str
    size_bytes: int
    sniffed_mime_type: str
    directory: Path

    @property
    def filename(self) -> str:
        if not self.extension:
            return self.resolved_base_name
        return f"{self.resolved_base_name}.{self.extension}"

    @property
    def final_path(self) -> Path:
        return self.directory / self.filename


@dataclass
class FileRecord:
    """The unit the pipeline validates, moves and reports on."""
    field_id: str
    index: int
    source: SourceDescriptor
    destination: DestinationDescriptor
    is_valid: bool = False
    processed: bool = False
    succeeded: bool = False
    errors: List[FailureReason] = field(default_factory=list)


@dataclass(frozen=True)
class Policy:
    """Size and type constraints applied to every record of a batch.

    Allow-list entries and ``forced_extension`` are compared as given, so they
    must be lower-case without a leading dot; ``load_policy`` builds them that way.
    """
    min_size_bytes: int = 0
    max_size_bytes: int = DEFAULT_MAX_SIZE
    match_mode: MatchMode = MatchMode.MIME
    allowed_mime_types: AllowList = WILDCARD
    allowed_extensions: AllowList = WILDCARD
    forced_extension: Optional[str] = None
    name_strategy: NameStrategy = NameStrategy.SEQUENTIAL
    override_base_name: Optional[str] = None  # honoured for single-file batches only

    @property
    def generate_random_names(self) -> bool:
        return self.name_strategy is NameStrategy.RANDOM


@dataclass
class ReportRow:
    """Represents a row in the upload report CSV."""
    field_id: str
    index: int
    source_name: str
    source_path: str
    size_bytes: int
    extension: str
    declared_mime: str
    sniffed_mime: str
    destination: str
    is_valid: bool
    succeeded: bool
    status: str       # one of: stored | rejected | failed | pending
    error: str
