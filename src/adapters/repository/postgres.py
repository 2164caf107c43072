"""
PostgreSQL repository adapter - Implements ImportItemRepository protocol.

This module provides the PostgreSQL implementation of the domain's
item store port using psycopg3 with raw SQL. Each item is stored as one
JSONB document keyed by (name, discriminator).

Atomicity:
----------
update() runs in a single transaction:

1. INSERT ... ON CONFLICT DO NOTHING guarantees a row exists, so there is
   always something to lock, even for a key seen for the first time.
2. SELECT ... FOR UPDATE locks that row; concurrent updates to the same key
   queue behind it.
3. The transition runs and the result is written back (or the row is
   deleted when the transition removes the item).

Items under different keys never contend.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg.types.json import Jsonb
from psycopg_pool import ConnectionPool

from src.domain.ports import (
    AddressMatch,
    Facts,
    ImportItem,
    ImportPath,
    ItemKey,
    ItemTransition,
    OffchainStatus,
    StepName,
)

logger = logging.getLogger(__name__)


def item_to_document(item: ImportItem) -> dict[str, Any]:
    """Serialize an item to a JSON-compatible dict (enums as their values)."""
    facts = item.facts
    offchain_status = None
    if facts.offchain_status is not None:
        offchain_status = {
            "resolver_match": facts.offchain_status.resolver_match.value,
            "address_match": facts.offchain_status.address_match.value,
        }
    return {
        "path": item.path.value,
        "steps": [step.value for step in item.steps],
        "current_step_index": item.current_step_index,
        "facts": {
            "dnssec_enabled": facts.dnssec_enabled,
            "dns_owner_address": facts.dns_owner_address,
            "offchain_status": offchain_status,
            "connected_address": facts.connected_address,
            "parent_resolver_address": facts.parent_resolver_address,
        },
        "auxiliary": dict(item.auxiliary),
    }


def item_from_document(document: dict[str, Any]) -> ImportItem:
    """Rebuild an item from its stored document."""
    raw_facts = dict(document.get("facts") or {})
    raw_status = raw_facts.pop("offchain_status", None)
    offchain_status = None
    if raw_status is not None:
        offchain_status = OffchainStatus(
            resolver_match=AddressMatch(raw_status["resolver_match"]),
            address_match=AddressMatch(raw_status["address_match"]),
        )
    return ImportItem(
        path=ImportPath(document["path"]),
        steps=tuple(StepName(step) for step in document["steps"]),
        current_step_index=document["current_step_index"],
        facts=Facts(offchain_status=offchain_status, **raw_facts),
        auxiliary=dict(document.get("auxiliary") or {}),
    )


class PostgresImportItemRepository:
    """
    Implements ImportItemRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def load(self, key: ItemKey) -> ImportItem | None:
        sql = """
            SELECT item FROM dns_import_items
            WHERE name = %s AND discriminator = %s
        """

        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(sql, (key.name, key.discriminator))
            row = cursor.fetchone()
        if row is None:
            return None
        return item_from_document(row[0])

    def update(self, key: ItemKey, transition: ItemTransition) -> ImportItem | None:
        """
        Atomically apply a transition to the stored item.

        Args:
            key: Item identity
            transition: Pure function from current item to next item

        Returns:
            The stored item after the transition, or None if it was removed
        """
        ensure_sql = """
            INSERT INTO dns_import_items (name, discriminator, item, updated_at)
            VALUES (%s, %s, %s, NOW())
            ON CONFLICT (name, discriminator) DO NOTHING
        """

        select_sql = """
            SELECT item FROM dns_import_items
            WHERE name = %s AND discriminator = %s
            FOR UPDATE
        """

        save_sql = """
            UPDATE dns_import_items
            SET item = %s, updated_at = NOW()
            WHERE name = %s AND discriminator = %s
        """

        delete_sql = """
            DELETE FROM dns_import_items
            WHERE name = %s AND discriminator = %s
        """

        params = (key.name, key.discriminator)
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute(ensure_sql, (*params, Jsonb(item_to_document(ImportItem()))))
            cursor.execute(select_sql, params)
            current = item_from_document(cursor.fetchone()[0])

            updated = transition(current)

            if updated is None:
                cursor.execute(delete_sql, params)
            else:
                cursor.execute(save_sql, (Jsonb(item_to_document(updated)), *params))
            conn.commit()
        return updated

    def clear(self) -> None:
        with self._pool.connection() as conn, conn.cursor() as cursor:
            cursor.execute("DELETE FROM dns_import_items")
            conn.commit()
            logger.info("Cleared %d import item(s)", cursor.rowcount)


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
