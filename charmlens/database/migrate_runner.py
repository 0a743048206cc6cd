"""Database migration runner for production.

Applies Alembic migrations up to head. If the upgrade fails because the schema
already exists but Alembic was not tracking it, the runner verifies the schema
and stamps head instead.

Run as a one-off job during deploys: `python -m charmlens.database.migrate_runner`.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import List, Tuple

from alembic import command
from alembic.config import Config
from sqlalchemy import text

from charmlens.database.database import DATABASE_URL, _is_sqlite_url, build_engine

logger = logging.getLogger(__name__)


def _alembic_cfg() -> Config:
    cfg = Config(os.getenv("ALEMBIC_INI", "alembic.ini"))
    cfg.set_main_option("sqlalchemy.url", DATABASE_URL)
    return cfg


def _table_exists(conn, table: str) -> bool:
    # Postgres: to_regclass returns null if missing.
    row = conn.execute(text("SELECT to_regclass(:t)"), {"t": table}).fetchone()
    return bool(row and row[0])


def _column_exists(conn, table: str, column: str) -> bool:
    row = conn.execute(
        text(
            "SELECT 1 FROM information_schema.columns "
            "WHERE table_schema = 'public' AND table_name = :t AND column_name = :c"
        ),
        {"t": table, "c": column},
    ).fetchone()
    return bool(row)


def required_schema_checks() -> List[Tuple[str, str]]:
    """Return (kind, name) checks required to safely stamp head."""
    return [
        ("table", "collection_items"),
        ("column:collection_items", "seq"),
        ("column:collection_items", "collection_key"),
        ("column:collection_items", "item_id"),
        ("column:collection_items", "payload"),
        ("column:collection_items", "created_at"),
    ]


def missing_requirements(conn) -> List[str]:
    missing: List[str] = []
    for kind, name in required_schema_checks():
        if kind == "table":
            if not _table_exists(conn, name):
                missing.append(f"missing table: {name}")
        elif kind.startswith("column:"):
            table = kind.split(":", 1)[1]
            if not _column_exists(conn, table, name):
                missing.append(f"missing column: {table}.{name}")
        else:
            missing.append(f"unknown check: {kind} {name}")
    return missing


def is_already_applied_error(error: Exception) -> bool:
    """True when an upgrade failed because the collection_items schema is already there."""
    msg = str(error).lower()
    return "already exists" in msg and "collection_items" in msg


def main() -> int:
    if _is_sqlite_url(DATABASE_URL):
        command.upgrade(_alembic_cfg(), "head")
        return 0

    engine = build_engine(DATABASE_URL)

    try:
        command.upgrade(_alembic_cfg(), "head")
        return 0
    except Exception as e:
        if not is_already_applied_error(e):
            raise

        with engine.begin() as conn:
            missing = missing_requirements(conn)
        if missing:
            raise RuntimeError(
                "Alembic upgrade failed and schema is not at expected baseline; refusing to stamp head. "
                + "; ".join(missing)
            ) from e

        logger.info("Schema already present; stamping Alembic head")
        command.stamp(_alembic_cfg(), "head")
        return 0


if __name__ == "__main__":
    logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO"))
    sys.exit(main())
