"""
Shared fixtures: fake host temp files and field-indexed submissions.
"""
import itertools
from pathlib import Path

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 48


@pytest.fixture
def tmp_upload_dir(tmp_path: Path) -> Path:
    d = tmp_path / "host-tmp"
    d.mkdir()
    return d


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    d = tmp_path / "uploads"
    d.mkdir()
    return d


@pytest.fixture
def host_file(tmp_upload_dir: Path):
    """Write ``content`` to a host-style temp file and describe it as one upload."""
    counter = itertools.count(1)

    def _make(name: str, content: bytes, mime: str = "application/octet-stream") -> dict:
        tmp = tmp_upload_dir / f"php{next(counter):04d}"
        tmp.write_bytes(content)
        return {"name": name, "type": mime, "tmp_name": str(tmp), "error": 0, "size": len(content)}

    return _make


@pytest.fixture
def multi_submission():
    """Combine per-file dicts into the structure-of-arrays shape of ``name[]`` fields."""

    def _combine(field_id: str, *files: dict) -> dict:
        keys = ("name", "type", "tmp_name", "error", "size")
        return {field_id: {k: [f[k] for f in files] for k in keys}}

    return _combine
