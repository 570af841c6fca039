"""Shared utility functions."""
import hashlib
from datetime import datetime, timezone
from pathlib import PurePosixPath

from src.shared.constants import LANGUAGE_BY_EXTENSION


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def sha256_hex(content: str) -> str:
    """Return the hex SHA-256 digest of *content* encoded as UTF-8."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def language_for_path(path: str, hint: str | None = None) -> str | None:
    """Resolve the language of a file from an explicit *hint* or its extension."""
    if hint:
        return hint.lower()
    return LANGUAGE_BY_EXTENSION.get(PurePosixPath(path).suffix.lower())
