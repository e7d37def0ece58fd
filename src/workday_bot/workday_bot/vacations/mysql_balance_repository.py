from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import BalanceOperation
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import VacationBalance
from .repository import BalanceRepository

_COLUMNS = "user_id, total_days, used_days, pending_days, carried_over_days, last_updated"


def _to_balance(r: dict) -> VacationBalance:
    return VacationBalance(
        user_id=str(r["user_id"]),
        total_days=int(r["total_days"]),
        used_days=int(r["used_days"]),
        pending_days=int(r["pending_days"]),
        carried_over_days=int(r["carried_over_days"]),
        last_updated=r.get("last_updated"),
    )


class MySQLBalanceRepository(BalanceRepository):
    """Counters are INT UNSIGNED, so every decrement is written with IF() to floor at 0."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: str) -> Optional[VacationBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vacation_balances WHERE user_id=%s", (str(user_id),))
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_all(self) -> Sequence[VacationBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM vacation_balances ORDER BY user_id")
            return [_to_balance(r) for r in fetchall(cur)]

    def adjust_total(self, *, user_id: str, operation: BalanceOperation, days: int, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            if operation == BalanceOperation.SET:
                cur.execute(
                    """
                    INSERT INTO vacation_balances(user_id, total_days, last_updated)
                    VALUES(%s,%s,%s)
                    ON DUPLICATE KEY UPDATE total_days=VALUES(total_days), last_updated=VALUES(last_updated)
                    """,
                    (str(user_id), int(days), at),
                )
                return True

            if operation == BalanceOperation.ADD:
                cur.execute(
                    "UPDATE vacation_balances SET total_days=total_days + %s, last_updated=%s WHERE user_id=%s",
                    (int(days), at, str(user_id)),
                )
            else:
                cur.execute(
                    """
                    UPDATE vacation_balances
                    SET total_days=IF(total_days >= %s, total_days - %s, 0), last_updated=%s
                    WHERE user_id=%s
                    """,
                    (int(days), int(days), at, str(user_id)),
                )
            # rowcount counts matched rows only with CLIENT_FOUND_ROWS; re-check existence instead.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM vacation_balances WHERE user_id=%s", (str(user_id),))
            return fetchone(cur) is not None

    def reserve(self, *, user_id: str, days: int, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_balances
                SET pending_days=pending_days + %s, last_updated=%s
                WHERE user_id=%s AND total_days >= used_days + pending_days + %s
                """,
                (int(days), at, str(user_id), int(days)),
            )
            return cur.rowcount > 0

    def release(self, *, user_id: str, days: int, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_balances
                SET pending_days=IF(pending_days >= %s, pending_days - %s, 0), last_updated=%s
                WHERE user_id=%s
                """,
                (int(days), int(days), at, str(user_id)),
            )
            return cur.rowcount > 0

    def consume(self, *, user_id: str, days: int, at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_balances
                SET used_days=used_days + %s,
                    pending_days=IF(pending_days >= %s, pending_days - %s, 0),
                    last_updated=%s
                WHERE user_id=%s
                """,
                (int(days), int(days), int(days), at, str(user_id)),
            )
            return cur.rowcount > 0
