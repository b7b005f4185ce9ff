"""Seed default categories, suppliers and roles into the console database."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv
from jsonschema import Draft202012Validator, ValidationError as JsonSchemaValidationError
from sqlalchemy import func, select

from packages.db import Category, Supplier, create_all, get_db_path, session_scope
from services.access import RoleService
from services.catalog import CatalogService

LOGGER = logging.getLogger("carestore.seed")

REPO_ROOT = Path(__file__).resolve().parents[1]
SCHEMA_PATH = REPO_ROOT / "contracts" / "schemas" / "seed.schema.json"
DEFAULT_SEED_PATH = REPO_ROOT / "contracts" / "seed.yaml"

with SCHEMA_PATH.open("r", encoding="utf-8") as handle:
    _SCHEMA = json.load(handle)
_VALIDATOR = Draft202012Validator(_SCHEMA)


def load_seed(path: Path | None = None) -> Dict[str, Any]:
    """Read and validate a seed file."""

    seed_path = path or DEFAULT_SEED_PATH
    data = yaml.safe_load(seed_path.read_text(encoding="utf-8")) or {}
    try:
        _VALIDATOR.validate(data)
    except JsonSchemaValidationError as exc:
        raise ValueError(f"Seed file {seed_path} failed schema validation: {exc.message}") from exc
    return data


def run(db_path: Path | None = None, seed_path: Path | None = None) -> Dict[str, int]:
    """Insert records from the seed file that are not present yet; return created counts."""

    seed = load_seed(seed_path)
    create_all(db_path)
    created = {"categories": 0, "suppliers": 0, "roles": 0}
    with session_scope(db_path) as session:
        catalog = CatalogService(session)
        roles = RoleService(session)
        for domain, entries in seed.get("categories", {}).items():
            for entry in entries:
                if _exists(session, Category, domain, entry["name"]):
                    continue
                catalog.create_category(domain, entry)
                created["categories"] += 1
        for domain, entries in seed.get("suppliers", {}).items():
            for entry in entries:
                if _exists(session, Supplier, domain, entry["name"]):
                    continue
                catalog.create_supplier(domain, entry)
                created["suppliers"] += 1
        for entry in seed.get("roles", []):
            if roles.find(entry["name"]) is not None:
                continue
            roles.create(entry)
            created["roles"] += 1
    LOGGER.info(
        "Seeded %s categories, %s suppliers and %s roles",
        created["categories"],
        created["suppliers"],
        created["roles"],
    )
    return created


def _exists(session, model, domain: str, name: str) -> bool:
    stmt = select(model.id).where(model.domain == domain, func.lower(model.name) == name.strip().lower())
    return session.execute(stmt).first() is not None


def main() -> None:
    load_dotenv(REPO_ROOT / ".env")
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Seed default CareStore catalog data.")
    parser.add_argument(
        "--database",
        type=Path,
        default=get_db_path(),
        help="Path to the SQLite database file (default: %(default)s)",
    )
    parser.add_argument(
        "--seed",
        type=Path,
        default=DEFAULT_SEED_PATH,
        help="YAML seed file (default: %(default)s)",
    )
    args = parser.parse_args()
    run(args.database, args.seed)


if __name__ == "__main__":
    main()
