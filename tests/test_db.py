# tests/test_db.py
from datetime import date, datetime

import pandas as pd
import pytest
from sqlalchemy import text

from perfmon.dates import as_date, days_in_range, month_range
from perfmon.db import (
    build_db_url, check_db_connection, execute_query, from_json, get_connection,
    get_transaction, reset_db_engine, to_json,
)


def test_connection_is_healthy(db):
    assert check_db_connection() == (True, None)


def test_transaction_rolls_back(db):
    with pytest.raises(RuntimeError):
        with get_transaction() as conn:
            conn.execute(text(
                "INSERT INTO teams (id, name, created_at, updated_at) "
                "VALUES ('t1', 'Creators', '2026-10-01 00:00:00', '2026-10-01 00:00:00')"
            ))
            raise RuntimeError("abort")

    assert execute_query("SELECT id FROM teams") == []


def test_connection_commits(db):
    with get_connection() as conn:
        conn.execute(text(
            "INSERT INTO teams (id, name, created_at, updated_at) "
            "VALUES ('t1', 'Creators', '2026-10-01 00:00:00', '2026-10-01 00:00:00')"
        ))
    assert execute_query("SELECT id FROM teams") == [{'id': 't1'}]


def test_reset_engine_reconnects():
    reset_db_engine()
    assert check_db_connection() == (True, None)


def test_build_url():
    assert build_db_url({'url': 'sqlite://'}) == 'sqlite://'
    assert build_db_url({
        'driver': 'mysql+pymysql', 'user': 'app', 'password': 'p@ss',
        'host': 'db', 'port': 3306, 'database': 'perf',
    }) == 'mysql+pymysql://app:p%40ss@db:3306/perf'


def test_json_helpers():
    assert from_json(to_json({'a': 1})) == {'a': 1}
    assert from_json(None) == {}
    assert from_json(float('nan')) == {}
    assert from_json('not json') == {}
    assert from_json('[1, 2]') == {}


class TestDates:
    def test_month_range(self):
        assert month_range(date(2026, 2, 10)) == (date(2026, 2, 1), date(2026, 2, 28))

    def test_days_in_range(self):
        assert days_in_range(date(2026, 10, 1), date(2026, 10, 7)) == 7
        assert days_in_range(date(2026, 10, 7), date(2026, 10, 1)) == 0

    def test_as_date(self):
        assert as_date('2026-10-02') == date(2026, 10, 2)
        assert as_date('2026-10-02 08:30:00') == date(2026, 10, 2)
        assert as_date(datetime(2026, 10, 2, 8, 30)) == date(2026, 10, 2)
        assert as_date(pd.Timestamp('2026-10-02')) == date(2026, 10, 2)
        assert as_date(None) is None
