"""Apply ``database/schema.sql`` and ``database/seed.sql`` to the configured server.

Both files are idempotent, so the app factory may run them on every start
(``AUTO_INIT_DB`` / ``AUTO_SEED_DB``).
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Iterator, Mapping

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_DB_SELECTION = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def _strip_create_db_and_use(sql: str) -> str:
    # The target database comes from settings, never from the file.
    return _DB_SELECTION.sub("", sql)


def _strip_comments(sql: str) -> str:
    return _LINE_COMMENT.sub("", sql)


def _iter_sql_statements(sql: str) -> Iterator[str]:
    """Split on ``;`` outside quoted literals. Backslash escapes are honoured."""

    quote = ""
    start = 0
    i = 0
    while i < len(sql):
        ch = sql[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = ""
        elif ch in ("'", '"', "`"):
            quote = ch
        elif ch == ";":
            statement = sql[start:i].strip()
            if statement:
                yield statement
            start = i + 1
        i += 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def _factory(db_config: Mapping[str, Any]) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_mapping(db_config))


def ensure_database_exists(db_config: Mapping[str, Any]) -> None:
    factory = _factory(db_config)
    conn = factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{factory.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def run_sql_file(db_config: Mapping[str, Any], path: str | Path) -> int:
    """Execute every statement of ``path`` in one connection; returns the count."""

    script = _strip_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        count = 0
        for statement in _iter_sql_statements(script):
            cur.execute(statement)
            count += 1
        conn.commit()
        return count
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def apply_schema(db_config: Mapping[str, Any], *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = run_sql_file(db_config, schema_path)
    logger.info("Applied %s (%d statements)", Path(schema_path).name, count)


def apply_seed_sql(db_config: Mapping[str, Any], *, seed_path: str | Path) -> None:
    count = run_sql_file(db_config, seed_path)
    logger.info("Applied %s (%d statements)", Path(seed_path).name, count)


def list_tables(db_config: Mapping[str, Any]) -> list[str]:
    conn = _factory(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
