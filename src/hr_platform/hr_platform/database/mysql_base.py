from __future__ import annotations

import json
from contextlib import contextmanager
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Tuple

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection

if TYPE_CHECKING:
    from .unit_of_work import Transaction


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def db_transaction(conn_factory: DatabaseConnection) -> Iterator[Tuple[Any, Any]]:
    """One explicit transaction: commit on success, roll back on any exception.

    Rows read with ``FOR UPDATE`` inside the block stay locked until commit.
    """

    conn = conn_factory.connect()
    try:
        conn.start_transaction(isolation_level=conn_factory.isolation_level)
        cur = conn.cursor(dictionary=True)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def tx_cursor(conn_factory: DatabaseConnection, tx: Optional["Transaction"]):
    """Reuse the caller's transaction when given, else a short-lived connection."""

    if tx is not None:
        yield tx.conn, tx.cursor
        return
    with db_cursor(conn_factory) as pair:
        yield pair


def lock_clause(for_update: bool) -> str:
    return " FOR UPDATE" if for_update else ""


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: IntegrityError) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def dump_urls(urls: List[str]) -> str:
    return json.dumps(list(urls or []))


def load_urls(value: Any) -> List[str]:
    """JSON columns come back as str or bytes depending on the connector build."""

    if value is None:
        return []
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value or "[]")
    return [str(v) for v in value] if isinstance(value, list) else []
