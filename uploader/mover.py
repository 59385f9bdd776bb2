# uploader/mover.py

from __future__ import annotations
from dataclasses import replace
from typing import Optional
import logging
import shutil

from .errors import Messages, MoveFailed
from .model import FileRecord, NameStrategy
from .naming import directory_lock, resolve_name

logger = logging.getLogger(__name__)


def move_record(
    record: FileRecord,
    messages: Optional[Messages] = None,
    strategy: NameStrategy = NameStrategy.SEQUENTIAL,
) -> bool:
    """Move a validated record's bytes to its resolved destination.

    A record that already succeeded is left untouched. The destination
    directory's lock is held across the move; if another writer took the
    resolved name since ignition, the name is resolved again with
    ``strategy`` instead of overwriting that file.

    Raises:
        MoveFailed: If the transfer fails; ``record.succeeded`` stays False.
    """
    if record.succeeded:
        return True

    messages = messages or Messages()
    destination = record.destination
    with directory_lock(destination.directory):
        if destination.final_path.exists():
            fresh = resolve_name(
                destination.resolved_base_name, destination.extension, destination.directory, strategy,
            )
            logger.warning("%s was taken after ignition; storing as %s", destination.filename, fresh)
            destination = replace(destination, resolved_base_name=fresh)
            record.destination = destination

        target = destination.final_path
        try:
            shutil.move(record.source.path, str(target))
        except OSError as exc:
            logger.error("Could not move %s to %s: %s", record.source.path, target, exc)
            raise MoveFailed(
                messages.format("upload_move_error"), record=record, path=str(target),
            ) from exc

    record.succeeded = True
    record.processed = True
    logger.info("Stored %s as %s", record.source.original_filename, target)
    return True
