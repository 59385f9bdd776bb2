import zipfile
from pathlib import Path

import pytest

from uploader.filetype import sniff_mime

from conftest import PNG_BYTES


@pytest.mark.parametrize("content, expected", [
    (PNG_BYTES, "image/png"),
    (b"\xFF\xD8\xFF\xE0" + b"\x00" * 32, "image/jpeg"),
    (b"GIF89a" + b"\x00" * 16, "image/gif"),
    (b"%PDF-1.7\n%%EOF\n", "application/pdf"),
    (b"hello world\n", "text/plain"),
    (b'{"a": 1}', "application/json"),
    (b"<!DOCTYPE html><html></html>", "text/html"),
])
def test_signatures(tmp_path: Path, content: bytes, expected: str):
    p = tmp_path / "upload"
    p.write_bytes(content)
    assert sniff_mime(p) == expected


def test_zip_and_ooxml(tmp_path: Path):
    plain = tmp_path / "plain"
    with zipfile.ZipFile(plain, "w") as z:
        z.writestr("notes.txt", "x")
    docx = tmp_path / "docx"
    with zipfile.ZipFile(docx, "w") as z:
        z.writestr("word/document.xml", "<w/>")

    assert sniff_mime(plain) == "application/zip"
    assert sniff_mime(docx) == "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def test_unknown_binary_is_empty(tmp_path: Path):
    p = tmp_path / "blob"
    p.write_bytes(b"\x00\x01\x02\x03\xfe\xff")
    assert sniff_mime(p) == ""


def test_missing_or_empty_file_is_empty(tmp_path: Path):
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    assert sniff_mime(tmp_path / "missing") == ""
    assert sniff_mime(empty) == ""


def _flag_encrypted(path: Path) -> None:
    data = bytearray(path.read_bytes())
    local = data.find(b"PK\x03\x04")
    central = data.find(b"PK\x01\x02")
    data[local + 6] |= 0x01
    data[central + 8] |= 0x01
    path.write_bytes(bytes(data))


def test_encrypted_zip_member_is_still_a_zip(tmp_path: Path):
    p = tmp_path / "locked"
    with zipfile.ZipFile(p, "w") as z:
        z.writestr("mimetype", "application/vnd.oasis.opendocument.text")
    _flag_encrypted(p)
    assert sniff_mime(p) == "application/zip"


def test_truncated_zip_is_still_a_zip(tmp_path: Path):
    p = tmp_path / "broken"
    p.write_bytes(b"PK\x03\x04" + b"\x00" * 40)
    assert sniff_mime(p) == "application/zip"


def test_deeply_nested_brackets_are_plain_text(tmp_path: Path):
    p = tmp_path / "nested"
    p.write_bytes(b"[" * 5000)
    assert sniff_mime(p) == "text/plain"


def test_multibyte_character_cut_by_head_is_text(tmp_path: Path):
    p = tmp_path / "long.txt"
    p.write_bytes(b"a" * 16383 + "é".encode("utf-8") + b" more text\n")
    assert sniff_mime(p) == "text/plain"


def test_invalid_utf8_is_not_text(tmp_path: Path):
    p = tmp_path / "latin1"
    p.write_bytes("café au lait\n".encode("latin-1"))
    assert sniff_mime(p) == ""
