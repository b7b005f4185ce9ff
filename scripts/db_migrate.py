"""Create (or rebuild) the CareStore SQLite schema."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path

from packages.db import Base, create_all, ensure_db_path, get_db_path, get_engine

LOGGER = logging.getLogger("carestore.migrations")


def run(db_path: Path | None = None, *, reset: bool = False) -> Path:
    """Create every ORM table and return the database path.

    With ``reset`` the existing tables are dropped first, discarding all data.
    """

    target_path = ensure_db_path(db_path)
    if reset:
        Base.metadata.drop_all(get_engine(target_path))
        LOGGER.warning("Dropped all console tables at %s", target_path)
    try:
        create_all(target_path)
    except Exception:
        LOGGER.exception("Failed to create console tables at %s", target_path)
        raise
    LOGGER.info("Database ready at %s (%s tables)", target_path, len(Base.metadata.tables))
    return target_path


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Create the CareStore console database schema.")
    parser.add_argument(
        "--database",
        type=Path,
        default=get_db_path(),
        help="Path to the SQLite database file (default: %(default)s)",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop existing tables before creating them",
    )
    args = parser.parse_args()
    run(args.database, reset=args.reset)


if __name__ == "__main__":
    main()
