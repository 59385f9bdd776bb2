# uploader/config.py

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional
import json
import logging
import re

from .errors import DestinationUnwritable, InvalidDestination, Messages
from .model import DEFAULT_MAX_SIZE, WILDCARD, AllowList, MatchMode, NameStrategy, Policy

logger = logging.getLogger(__name__)

_UNITS = {
    "b": 1,
    "kb": 1024,
    "mb": 1048576,
    "gb": 1073741824,
}

_SIZE_RE = re.compile(r"^\s*(\d+)\s*([a-zA-Z]*)\s*$")


def parse_size(value: Any, unit: str = "b") -> int:
    """Convert a size to bytes.

    Args:
        value (Any): An int, or a string such as ``"2048"`` or ``"5mb"``.
        unit (str): Unit applied when ``value`` carries none (b, kb, mb, gb).

    Returns:
        int: Size in bytes.

    Raises:
        ValueError: On an unparseable value or an unknown unit.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid size: {value!r}")
    if isinstance(value, int):
        amount, suffix = value, ""
    else:
        m = _SIZE_RE.match(str(value))
        if not m:
            raise ValueError(f"Invalid size: {value!r}")
        amount, suffix = int(m.group(1)), m.group(2)

    key = (suffix or unit).lower()
    if key not in _UNITS:
        raise ValueError(f"Unknown size unit: {key!r}")
    return amount * _UNITS[key]


def parse_allowed(value: Any) -> AllowList:
    """Normalize an allow-list to WILDCARD or a lower-cased frozenset.

    Accepts ``"*"``, a pipe- or comma-separated string, or any iterable of strings.
    """
    if value is None or value == WILDCARD:
        return WILDCARD
    items: Iterable[str] = re.split(r"[|,]", value) if isinstance(value, str) else value
    cleaned = frozenset(str(v).strip().lower().lstrip(".") for v in items if str(v).strip())
    if not cleaned or WILDCARD in cleaned:
        return WILDCARD
    return cleaned


def clean_name(name: str) -> str:
    """Make a single-file name override filesystem friendly."""
    return re.sub(r"\s+", "-", name.strip()).lower()


def load_policy(cfg: Mapping[str, Any]) -> Policy:
    """Build a Policy from a flat configuration mapping.

    Recognized keys: ``min_size``, ``max_size``, ``size_unit``, ``match``
    (``mime`` | ``extension``), ``allowed_mime_types``, ``allowed_extensions``,
    ``force_extension``, ``generate_names``, ``name``. Setting
    ``allowed_extensions`` selects extension matching unless ``match`` is given.
    """
    unit = cfg.get("size_unit", "b")
    allowed_mimes = parse_allowed(cfg.get("allowed_mime_types"))
    allowed_exts = parse_allowed(cfg.get("allowed_extensions"))

    if cfg.get("match"):
        mode = MatchMode(str(cfg["match"]).lower())
    elif cfg.get("allowed_extensions"):
        mode = MatchMode.EXTENSION
    else:
        mode = MatchMode.MIME

    forced = cfg.get("force_extension") or None
    name = clean_name(str(cfg["name"])) if cfg.get("name") else None

    return Policy(
        min_size_bytes=parse_size(cfg.get("min_size", 0), unit),
        max_size_bytes=parse_size(cfg.get("max_size", DEFAULT_MAX_SIZE), unit),
        match_mode=mode,
        allowed_mime_types=allowed_mimes,
        allowed_extensions=allowed_exts,
        forced_extension=str(forced).strip().lstrip(".").lower() if forced else None,
        name_strategy=NameStrategy.RANDOM if cfg.get("generate_names") else NameStrategy.SEQUENTIAL,
        override_base_name=name or None,
    )


def load_config(path: Path | None) -> Dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path (Path | None): Path to the JSON configuration file.

    Returns:
        Dict[str, Any]: Configuration dictionary. Empty if no file is provided or read fails.
    """
    if not path:
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Failed to read config %s: %s", path, exc)
        return {}


def prepare_destination(
    path: str | Path | None,
    mode: int = 0o777,
    messages: Optional[Messages] = None,
) -> Path:
    """Return the destination directory, creating it when missing.

    Raises:
        InvalidDestination: If no path is given.
        DestinationUnwritable: If the directory is absent and cannot be created.
    """
    messages = messages or Messages()
    if not path:
        raise InvalidDestination(messages.format("invalid_destination"))

    dest = Path(path)
    if not dest.exists():
        try:
            dest.mkdir(mode=mode, parents=True)
        except OSError as exc:
            raise DestinationUnwritable(
                messages.format("could_not_create_path", dest), path=str(dest),
            ) from exc
        logger.info("Created destination directory %s", dest)
    elif not dest.is_dir():
        raise DestinationUnwritable(messages.format("could_not_create_path", dest), path=str(dest))
    return dest
