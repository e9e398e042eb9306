"""Small helpers: integer parsing, filesystem checks, environment and ids."""

from __future__ import annotations

import os
import re
import uuid

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def parse_int64(s: str) -> int:
    """Parse a base-10 int64; the empty string gives 0."""
    if not s:
        return 0
    if not _INT_RE.fullmatch(s):
        raise ValueError(f"invalid syntax: {s!r}")
    value = int(s)
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"value out of range: {s!r}")
    return value


def is_directory_exists(path: str | os.PathLike) -> bool:
    try:
        return os.path.isdir(path)
    except OSError:
        return False


def is_file_exists(path: str | os.PathLike) -> bool:
    """True when ``path`` exists and is not a directory."""
    try:
        os.stat(path)
    except OSError:
        return False
    return not os.path.isdir(path)


def ensure_directory_exists(path: str | os.PathLike) -> None:
    """Create ``path`` and its parents if it is not already a directory."""
    if not is_directory_exists(path):
        os.makedirs(path, mode=0o755, exist_ok=True)


def enable_debug() -> bool:
    """True when the DEBUG environment variable is 'true' (any case)."""
    return os.environ.get("DEBUG", "").lower() == "true"


def new_uuid() -> str:
    return str(uuid.uuid4())


def new_cloud_name(prefix: str) -> str:
    """Return ``prefix`` followed by the first 8 characters of a new UUID."""
    return prefix + new_uuid()[:8]