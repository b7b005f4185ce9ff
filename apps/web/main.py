"""CLI entry-point for running the CareStore console web server."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv
import uvicorn

from packages.db import get_db_path

from .app import create_app
from .config import load_config

LOGGER = logging.getLogger("carestore.web")
ROOT = Path(__file__).resolve().parents[2]


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    host_default = os.getenv("CARESTORE_WEB_HOST", "0.0.0.0")
    port_default = int(os.getenv("PORT") or os.getenv("CARESTORE_WEB_PORT", "8000"))
    parser = argparse.ArgumentParser(description="Run the CareStore console web server")
    parser.add_argument(
        "--host",
        default=host_default,
        help="Host interface to bind (default: %(default)s)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=port_default,
        help="Port to listen on (default: %(default)s)",
    )
    parser.add_argument(
        "--database",
        type=Path,
        default=None,
        help="SQLite database path (default: CARESTORE_DB_PATH or out/carestore.db)",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Run the ASGI server hosting the web application."""

    load_dotenv(ROOT / ".env")
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    args = _parse_args(argv)
    db_path = args.database or get_db_path()

    app = create_app(db_path=db_path, config=config, logger=LOGGER)
    LOGGER.info("Starting CareStore console on http://%s:%s (database %s)", args.host, args.port, db_path)

    uvicorn.run(app, host=args.host, port=args.port, log_level=config.log_level.lower())


if __name__ == "__main__":
    main()
