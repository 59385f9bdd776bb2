# uploader/naming.py

from __future__ import annotations
from pathlib import Path
from typing import AbstractSet, Dict
import secrets
import string
import threading

from .model import NameStrategy

TOKEN_LENGTH = 32
TOKEN_ALPHABET = "_" + string.ascii_lowercase + "123456789"

_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def directory_lock(directory: str | Path) -> threading.Lock:
    """Return the process-wide lock for ``directory``.

    Hold it across name resolution when several threads write into the same
    destination directory.
    """
    key = str(Path(directory).resolve())
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


def random_token(length: int = TOKEN_LENGTH) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def _compose(directory: Path, name: str, extension: str) -> Path:
    return directory / f"{name}.{extension}" if extension else directory / name


def resolve_name(
    base_name: str,
    extension: str,
    directory: str | Path,
    strategy: NameStrategy = NameStrategy.SEQUENTIAL,
    claimed: AbstractSet[Path] = frozenset(),
) -> str:
    """Return a base name that does not collide with an existing file.

    Sequential names try ``base_name`` first, then ``base_name-1``,
    ``base_name-2``, ...; random names draw a fresh token on every collision.

    Args:
        base_name (str): Desired name without extension. Ignored for random names.
        extension (str): Extension without the leading dot (may be empty).
        directory (str | Path): Destination directory.
        strategy (NameStrategy): Sequential counter or random token.
        claimed (AbstractSet[Path]): Paths already handed out in this batch;
            treated as taken even though nothing exists there yet.

    Returns:
        str: The free name, without directory or extension.
    """
    parent = Path(directory)

    def taken(name: str) -> bool:
        path = _compose(parent, name, extension)
        return path in claimed or path.exists()

    if strategy is NameStrategy.RANDOM:
        candidate = random_token()
        while taken(candidate):
            candidate = random_token()
        return candidate

    candidate = base_name
    i = 1
    while taken(candidate):
        candidate = f"{base_name}-{i}"
        i += 1
    return candidate
