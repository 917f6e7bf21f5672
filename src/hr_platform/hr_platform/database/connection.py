from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping

import mysql.connector

from ..core.constants import DEFAULT_TX_ISOLATION_LEVEL


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    isolation_level: str = DEFAULT_TX_ISOLATION_LEVEL

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], **overrides: Any) -> "DBConfig":
        """Build from a settings ``DB_CONFIG`` dict, filling MySQL defaults."""

        config = cls(
            host=str(data.get("host", "localhost")),
            port=int(data.get("port", 3306)),
            user=str(data.get("user", "root")),
            password=str(data.get("password", "")),
            database=str(data.get("database", "hr_platform")),
        )
        return replace(config, **overrides) if overrides else config


class DatabaseConnection:
    """Connection factory shared by every repository of one app.

    Connections are short-lived: one per read, or one per atomic unit when
    several statements must commit together.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    @property
    def isolation_level(self) -> str:
        return self._config.isolation_level

    def connect(self, *, with_database: bool = True):
        kwargs: dict[str, Any] = dict(
            host=self._config.host,
            port=self._config.port,
            user=self._config.user,
            password=self._config.password,
            autocommit=False,
            use_pure=True,
        )
        if with_database:
            kwargs["database"] = self._config.database
        return mysql.connector.connect(**kwargs)
