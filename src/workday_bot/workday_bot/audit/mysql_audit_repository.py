from __future__ import annotations

import json
from datetime import datetime

from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, *, user_id: str, action: AuditAction, details: dict, source: str, created_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_log(user_id, action, details, source, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (str(user_id), action.value, json.dumps(details, default=str), source, created_at),
            )
            return int(cur.lastrowid)
