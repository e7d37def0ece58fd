from pathlib import Path

from src.workday_bot.workday_bot.database.bootstrap import _strip_comments, _strip_create_db_and_use, iter_sql_statements

SCHEMA = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def test_splitter_keeps_semicolons_inside_quotes():
    sql = "INSERT INTO t VALUES('a;b'); SELECT 1;"
    assert list(iter_sql_statements(sql)) == ["INSERT INTO t VALUES('a;b')", "SELECT 1"]


def test_schema_defines_all_tables():
    sql = _strip_comments(_strip_create_db_and_use(SCHEMA.read_text(encoding="utf-8")))
    statements = list(iter_sql_statements(sql))

    created = [s.split("(")[0].split()[-1].strip("`") for s in statements if s.upper().startswith("CREATE TABLE")]
    assert sorted(created) == [
        "active_sessions",
        "audit_log",
        "time_entries",
        "users",
        "vacation_balances",
        "vacation_requests",
    ]
