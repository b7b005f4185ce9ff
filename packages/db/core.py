"""Core database utilities."""
from __future__ import annotations

import os
from pathlib import Path

DEFAULT_DB_PATH = Path(os.getenv("CARESTORE_DB_PATH", "out/carestore.db"))


def get_db_path() -> Path:
    """Return the configured database path."""

    override = os.getenv("CARESTORE_DB_PATH")
    if override:
        return Path(override)
    return DEFAULT_DB_PATH


def ensure_db_path(path: Path | None = None) -> Path:
    """Ensure the database directory exists and return the path."""

    db_path = Path(path or get_db_path())
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return db_path


__all__ = ["ensure_db_path", "get_db_path", "DEFAULT_DB_PATH"]
