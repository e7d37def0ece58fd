from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _to_user(row: dict) -> User:
    return User(
        user_id=str(row["user_id"]),
        display_name=row["display_name"],
        last_active=row["last_active"],
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, user_id: str, display_name: str, last_active: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(user_id, display_name, last_active)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE display_name=VALUES(display_name), last_active=VALUES(last_active)
                """,
                (str(user_id), display_name, last_active),
            )

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, display_name, last_active FROM users WHERE user_id=%s",
                (str(user_id),),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_active_since(self, since: datetime) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, display_name, last_active
                FROM users
                WHERE last_active >= %s
                ORDER BY last_active DESC
                """,
                (since,),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id, display_name, last_active FROM users ORDER BY display_name")
            return [_to_user(r) for r in fetchall(cur)]
