"""Atomic units for check-then-act workflows.

Services open ``with uow.atomic() as tx:`` and pass ``tx`` to every
repository call that belongs to the unit. Reads that feed a decision are made
with ``for_update=True`` so concurrent units touching the same rows serialize
instead of both acting on a stale read.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, ContextManager, Iterator, Protocol

from .connection import DatabaseConnection
from .mysql_base import db_transaction


@dataclass(frozen=True)
class Transaction:
    conn: Any
    cursor: Any


class UnitOfWork(Protocol):
    def atomic(self) -> ContextManager[Transaction]:
        raise NotImplementedError


class MySQLUnitOfWork(UnitOfWork):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def atomic(self) -> Iterator[Transaction]:
        with db_transaction(self._conn_factory) as (conn, cur):
            yield Transaction(conn=conn, cursor=cur)
