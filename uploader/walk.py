# uploader/walk.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List
import mimetypes


def iter_files(root: Path) -> Iterator[Path]:
    """Iterate over all files in a path, recursively if it's a directory.

    Args:
        root (Path): File or directory to scan.

    Yields:
        Path: Paths to each file found, in sorted order.
    """
    if root.is_file():
        yield root
        return

    for p in sorted(root.rglob("*")):
        if p.is_file():
            yield p


def build_submission(field_id: str, paths: Iterable[Path]) -> Dict[str, Any]:
    """Describe local files the way a host reports a multi-file upload field.

    Each file is its own temporary path; the declared type is guessed from
    the file name, as a browser would.

    Args:
        field_id (str): Upload field name.
        paths (Iterable[Path]): Files to offer.

    Returns:
        Dict[str, Any]: ``{field_id: {"name": [...], "type": [...], ...}}``.
    """
    field: Dict[str, List[Any]] = {"name": [], "type": [], "tmp_name": [], "error": [], "size": []}
    for p in paths:
        declared, _ = mimetypes.guess_type(p.name)
        field["name"].append(p.name)
        field["type"].append(declared or "application/octet-stream")
        field["tmp_name"].append(str(p))
        field["error"].append(0)
        field["size"].append(p.stat().st_size)
    return {field_id: field}
