# uploader/filetype.py

from __future__ import annotations
from pathlib import Path
from typing import Callable, List, Optional, Tuple
import codecs
import json
import logging
import zipfile

logger = logging.getLogger(__name__)

# --- signature predicates ---------------------------------------------------------


def _is_pdf(head: bytes) -> bool:
    return head.startswith(b"%PDF-")


def _is_tiff(head: bytes) -> bool:
    return head.startswith(b"II*\x00") or head.startswith(b"MM\x00*")


def _is_riff(fourcc: bytes) -> Callable[[bytes], bool]:
    def check(head: bytes) -> bool:
        return head[:4] == b"RIFF" and len(head) >= 12 and head[8:12] == fourcc
    return check


def _is_mp4(head: bytes) -> bool:
    return b"ftyp" in head[:16]


def _is_mp3(head: bytes) -> bool:
    return head.startswith(b"ID3") or (len(head) > 2 and head[0] == 0xFF and (head[1] & 0xE0) == 0xE0)


def _prefix(*magic: bytes) -> Callable[[bytes], bool]:
    return lambda head: head.startswith(magic)


_SIGNATURES: List[Tuple[Callable[[bytes], bool], str]] = [
    (_is_pdf, "application/pdf"),
    (_prefix(b"\xFF\xD8\xFF"), "image/jpeg"),
    (_prefix(b"\x89PNG\r\n\x1a\n"), "image/png"),
    (_prefix(b"GIF87a", b"GIF89a"), "image/gif"),
    (_is_tiff, "image/tiff"),
    (_is_riff(b"WEBP"), "image/webp"),
    (_is_riff(b"WAVE"), "audio/x-wav"),
    (_is_riff(b"AVI "), "video/x-msvideo"),
    (_is_mp4, "video/mp4"),
    (_is_mp3, "audio/mpeg"),
    (_prefix(b"7z\xBC\xAF\x27\x1C"), "application/x-7z-compressed"),
    (_prefix(b"Rar!\x1A\x07\x00", b"Rar!\x1A\x07\x01\x00"), "application/x-rar"),
    (_prefix(b"\x1F\x8B\x08"), "application/gzip"),
    (_prefix(b"BZh"), "application/x-bzip2"),
    (_prefix(b"\xFD7zXZ\x00"), "application/x-xz"),
]

_ZIP_MAGIC = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")

_ODF_MIMES = {
    "application/vnd.oasis.opendocument.text",
    "application/vnd.oasis.opendocument.spreadsheet",
    "application/vnd.oasis.opendocument.presentation",
    "application/epub+zip",
}


def _zip_family(p: Path) -> str:
    """Refine a zip container into OOXML/ODF/EPUB where its members say so."""
    try:
        with zipfile.ZipFile(p, "r") as z:
            names = set(z.namelist())
            if any(n.startswith("word/") for n in names):
                return "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
            if any(n.startswith("xl/") for n in names):
                return "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
            if any(n.startswith("ppt/") for n in names):
                return "application/vnd.openxmlformats-officedocument.presentationml.presentation"
            if "mimetype" in names:
                with z.open("mimetype") as mf:
                    declared = mf.read(200).decode("utf-8", errors="ignore").strip()
                if declared in _ODF_MIMES:
                    return declared
    except Exception:
        # damaged or encrypted members still count as a zip
        logger.debug("Could not inspect zip members of %s", p, exc_info=True)
    return "application/zip"


def _text_mime(head: bytes) -> Optional[str]:
    """Heuristically classify textual content."""
    if b"\x00" in head:
        return None
    try:
        # the head may end inside a multi-byte character
        text = codecs.getincrementaldecoder("utf-8")().decode(head, final=False)
    except UnicodeDecodeError:
        return None

    s = text.strip().lower()
    if s.startswith("<!doctype html") or s.startswith("<html"):
        return "text/html"
    if s.startswith("{") or s.startswith("["):
        try:
            json.loads(text)
            return "application/json"
        except (ValueError, RecursionError):
            pass
    if s.startswith("<?xml"):
        return "text/xml"
    if s:
        return "text/plain"
    return None


# --- public API -----------------------------------------------------------------


def sniff_mime(path: str | Path, head_bytes: int = 16384) -> str:
    """Detect the media type of a file from its content.

    Args:
        path (str | Path): File to inspect.
        head_bytes (int): How many leading bytes to inspect.

    Returns:
        str: Lower-cased mime type, or an empty string when the content could
        not be read or classified.
    """
    p = Path(path)
    try:
        with p.open("rb") as f:
            head = f.read(head_bytes)
    except OSError as exc:
        logger.debug("Content sniffing unavailable for %s: %s", p, exc)
        return ""

    if not head:
        return ""

    for matches, mime in _SIGNATURES:
        if matches(head):
            return mime

    if head.startswith(_ZIP_MAGIC):
        return _zip_family(p)

    return _text_mime(head) or ""
