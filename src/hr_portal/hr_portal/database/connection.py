from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str

    @classmethod
    def from_settings(cls, db_config: Mapping[str, Any]) -> "DBConfig":
        """Build from the DB_CONFIG dict of a settings module."""
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "hr_portal")),
        )


def connect(config: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=config.host, port=config.port, user=config.user, password=config.password)
    if with_database:
        kwargs["database"] = config.database
    return mysql.connector.connect(**kwargs)


class Database:
    """Connection factory shared by the MySQL repositories.

    Every unit of work opens its own short-lived connection, which is enough
    for a threaded Flask server.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @contextmanager
    def cursor(self, *, dictionary: bool = True) -> Iterator[Any]:
        """Yield a cursor; commit on success, roll back on any error."""
        conn = connect(self._config)
        try:
            cur = conn.cursor(dictionary=dictionary)
            try:
                yield cur
                conn.commit()
            finally:
                cur.close()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()
