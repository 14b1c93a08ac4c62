# tests/test_daily_report.py
from datetime import date

import pytest

from perfmon.db import from_json
from perfmon.forms import CreatorReport, HostLiveReport, PerformanceLogCreate
from perfmon.reports.queries import (
    ReportQueries, load_daily_report_history, load_daily_reports, load_performance_logs,
)

from .conftest import make_session


@pytest.fixture
def host_report():
    return HostLiveReport(live_duration_hours=2.5, total_sales=150000, notes="Flash sale")


def test_submit_and_read_history(db, staff_session, host_report):
    assert load_daily_report_history(staff_session.user_id).empty

    success, _ = ReportQueries(staff_session).submit_daily_report(host_report)
    assert success

    history = load_daily_report_history(staff_session.user_id)
    assert len(history) == 1
    row = history.iloc[0]
    assert row['division'] == 'host_live'
    assert from_json(row['meta']) == {
        'live_duration_hours': 2.5, 'total_sales': 150000.0, 'notes': 'Flash sale',
    }


def test_history_is_limited(db, staff_session, host_report):
    queries = ReportQueries(staff_session)
    for _ in range(3):
        queries.submit_daily_report(host_report)

    assert len(load_daily_report_history(staff_session.user_id, limit=2)) == 2
    assert len(load_daily_reports()) == 3


def test_report_must_match_division(db, staff_session):
    success, message = ReportQueries(staff_session).submit_daily_report(
        CreatorReport(video_count=1, post_count=1)
    )
    assert not success
    assert message == "Report does not match your division"
    assert load_daily_reports().empty


def test_report_needs_a_division(db, host_report):
    session = make_session(user_id="u-3", role="pkl", division=None, full_name="Putri Intern")
    success, message = ReportQueries(session).submit_daily_report(host_report)
    assert not success
    assert 'division' in message


def test_report_needs_a_session(db, host_report):
    success, _ = ReportQueries(None).submit_daily_report(host_report)
    assert not success


class TestPerformanceLog:
    def test_manager_records_metric(self, db, auth, manager_session):
        auth.sign_up('ayu@example.com', 'secret123', 'Ayu Lestari', 'ayu', division='konten_kreator')
        user_id = auth.authenticate('ayu@example.com', 'secret123')[1]['id']

        success, _ = ReportQueries(manager_session).record_performance_log(
            PerformanceLogCreate(date=date(2026, 10, 2), user_id=user_id, metric='video_count', value=4)
        )
        assert success

        logs = load_performance_logs(user_id=user_id)
        assert len(logs) == 1
        row = logs.iloc[0]
        assert row['user_name'] == 'Ayu Lestari'
        assert row['division'] == 'konten_kreator'
        assert row['value'] == 4
        assert from_json(row['meta']) == {'recorded_by': manager_session.user_id}

    def test_date_range(self, db, auth, manager_session):
        auth.sign_up('ayu@example.com', 'secret123', 'Ayu Lestari', 'ayu', division='konten_kreator')
        user_id = auth.authenticate('ayu@example.com', 'secret123')[1]['id']
        queries = ReportQueries(manager_session)
        for day in (1, 15, 28):
            queries.record_performance_log(
                PerformanceLogCreate(date=date(2026, 9, day), user_id=user_id, metric='post_count', value=1)
            )

        logs = load_performance_logs(start_date=date(2026, 9, 10), end_date=date(2026, 9, 30))
        assert sorted(logs['date'].astype(str)) == ['2026-09-15', '2026-09-28']

    def test_staff_cannot_record(self, db, staff_session):
        success, _ = ReportQueries(staff_session).record_performance_log(
            PerformanceLogCreate(date=date(2026, 10, 2), user_id='u-2', metric='video_count', value=4)
        )
        assert not success
        assert load_performance_logs().empty

    def test_unknown_employee(self, db, manager_session):
        success, message = ReportQueries(manager_session).record_performance_log(
            PerformanceLogCreate(date=date(2026, 10, 2), user_id='ghost', metric='video_count', value=4)
        )
        assert not success
        assert message == "Selected employee no longer exists"
