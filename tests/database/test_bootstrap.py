from __future__ import annotations

import mysql.connector
import pytest

from src.freemeal_tracker.freemeal_tracker.database import bootstrap


class RecordingConnection:
    def __init__(self, log: list, database):
        self.log = log
        self.database = database

    def cursor(self, *args, **kwargs):
        return self

    def execute(self, stmt, params=None):
        self.log.append((self.database, " ".join(stmt.split())))

    def commit(self):
        pass

    def close(self):
        pass


@pytest.fixture()
def executed(monkeypatch):
    log: list = []
    monkeypatch.setattr(
        mysql.connector,
        "connect",
        lambda **kwargs: RecordingConnection(log, kwargs.get("database")),
    )
    return log


DB_CONFIG = {"host": "db", "port": 3306, "user": "app", "password": "pw", "database": "pantry_staging"}


def test_schema_is_applied_to_the_configured_database(executed):
    bootstrap.apply_schema(DB_CONFIG)

    create_db = [stmt for db, stmt in executed if stmt.upper().startswith("CREATE DATABASE")]
    assert create_db == [
        "CREATE DATABASE IF NOT EXISTS `pantry_staging` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
    ]

    table_stmts = [(db, stmt) for db, stmt in executed if not stmt.upper().startswith("CREATE DATABASE")]
    assert table_stmts
    assert all(db == "pantry_staging" for db, _ in table_stmts)
    assert not any(stmt.upper().startswith("USE ") for _, stmt in table_stmts)
    assert not any("freemeal_db" in stmt for _, stmt in executed)


def test_seed_is_applied_to_the_configured_database(executed):
    bootstrap.apply_seed_sql(DB_CONFIG)

    assert executed
    assert all(db == "pantry_staging" for db, _ in executed)
    assert not any(stmt.upper().startswith(("USE ", "CREATE DATABASE")) for _, stmt in executed)


@pytest.mark.parametrize("path", [bootstrap.SCHEMA_PATH, bootstrap.SEED_PATH])
def test_sql_files_do_not_pin_a_database(path):
    sql = path.read_text(encoding="utf-8")
    code = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))

    for stmt in bootstrap.iter_sql_statements(code):
        assert not stmt.upper().startswith(("USE ", "CREATE DATABASE")), stmt


def test_statements_split_outside_quotes_only():
    sql = "INSERT INTO t (v) VALUES ('a;b'), ('it\\'s;'); SELECT 1;\n"

    assert list(bootstrap.iter_sql_statements(sql)) == [
        "INSERT INTO t (v) VALUES ('a;b'), ('it\\'s;')",
        "SELECT 1",
    ]
