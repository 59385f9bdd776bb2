# uploader/errors.py

from __future__ import annotations
from typing import Any, Dict, Mapping, Optional

DEFAULT_MESSAGES: Dict[str, str] = {
    "invalid_file_element": "Invalid File Element ID",
    "nothing_uploaded": "No files have been selected to upload.",
    "invalid_destination": "Invalid Destination Path",
    "could_not_create_path": "The {} doesn't exist and could not be created.",
    "file_input_missing": "The file id {} is missing from the upload form.",
    "too_small": "Too small",
    "too_large": "Too large",
    "invalid_mime": "Invalid mime type uploaded ({}). Allowed mime types are: {}.",
    "invalid_ext": "Invalid file type uploaded ({}). Allowed file types are: {}.",
    "upload_move_error": "The file could not be uploaded: Permission Error",
    "destination_missing": "The destination path configuration setting is missing.",
}


class Messages:
    """Message templates, optionally overridden per pipeline.

    Overrides are copied at construction; keys that are not known message ids
    are ignored.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None) -> None:
        self._templates = dict(DEFAULT_MESSAGES)
        for key, template in (overrides or {}).items():
            if key in self._templates and template:
                self._templates[key] = template

    def format(self, key: str, *args: Any) -> str:
        return self._templates[key].format(*args)


class UploadError(Exception):
    """Base class for configuration and I/O failures raised by the pipeline."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.context = context


class InvalidElement(UploadError):
    pass


class NoFilesSubmitted(UploadError):
    pass


class DestinationMissing(UploadError):
    pass


class InvalidDestination(UploadError):
    pass


class DestinationUnwritable(UploadError):
    pass


class MoveFailed(UploadError):
    """A validated file could not be moved to its destination."""

    def __init__(self, message: str, record: Any = None, **context: Any) -> None:
        super().__init__(message, **context)
        self.record = record
