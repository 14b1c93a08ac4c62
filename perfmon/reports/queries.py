# perfmon/reports/queries.py
"""
SQL Queries for daily reports and performance logs

performance_logs is append-only: there is no update or delete path.
A daily report is one row with metric 'daily_report', value 1 and the
division-specific payload in meta.
"""

import logging
import uuid
from datetime import date
from typing import Optional, Tuple

import pandas as pd
import streamlit as st

from ..access_control import AccessControl, PermissionDenied
from ..auth import SessionContext
from ..config import config
from ..constants import DAILY_REPORT_METRIC, DAILY_REPORT_HISTORY_LIMIT
from ..dates import today
from ..db import execute_query, execute_query_df, execute_update, now_timestamp, to_json
from ..forms import PerformanceLogCreate

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = config.get_app_setting("CACHE_TTL_SECONDS", 300)


# =============================================================================
# CACHED LOADERS
# =============================================================================

@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_daily_report_history(user_id: str, limit: int = DAILY_REPORT_HISTORY_LIMIT) -> pd.DataFrame:
    """Latest daily reports of one user"""
    query = """
        SELECT id, date, division, meta, created_at
        FROM performance_logs
        WHERE user_id = :user_id AND metric = :metric
        ORDER BY date DESC, created_at DESC
        LIMIT :limit
    """
    return execute_query_df(query, {
        'user_id': user_id, 'metric': DAILY_REPORT_METRIC, 'limit': int(limit),
    })


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_daily_reports() -> pd.DataFrame:
    """Every daily report with its author's name, newest first"""
    query = """
        SELECT p.id, p.date, p.user_id, p.division, p.meta, p.created_at,
               m.full_name AS user_name
        FROM performance_logs p
        LEFT JOIN users_meta m ON m.id = p.user_id
        WHERE p.metric = :metric
        ORDER BY p.date DESC, p.created_at DESC
    """
    return execute_query_df(query, {'metric': DAILY_REPORT_METRIC})


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_performance_logs(
    user_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> pd.DataFrame:
    """Performance log rows, optionally for one user and a date range"""
    query = """
        SELECT p.id, p.date, p.user_id, m.full_name AS user_name, p.division,
               p.team_id, p.metric, p.value, p.meta, p.created_at
        FROM performance_logs p
        LEFT JOIN users_meta m ON m.id = p.user_id
        WHERE 1 = 1
    """
    params = {}

    if user_id:
        query += " AND p.user_id = :user_id"
        params['user_id'] = user_id
    if start_date:
        query += " AND p.date >= :start_date"
        params['start_date'] = start_date.isoformat()
    if end_date:
        query += " AND p.date <= :end_date"
        params['end_date'] = end_date.isoformat()

    query += " ORDER BY p.date DESC, p.created_at DESC"
    return execute_query_df(query, params)


def clear_report_caches():
    load_daily_report_history.clear()
    load_daily_reports.clear()
    load_performance_logs.clear()


# =============================================================================
# MUTATIONS
# =============================================================================

class ReportQueries:
    """
    Inserts into performance_logs.

    Usage:
        queries = ReportQueries(session)
        success, message = queries.submit_daily_report(report)
    """

    def __init__(self, session: Optional[SessionContext]):
        self.session = session
        self.access = AccessControl(session)

    def submit_daily_report(self, report) -> Tuple[bool, str]:
        """Store a validated DailyReport variant for the signed-in user"""
        if self.session is None:
            return False, "Please sign in to submit a report"
        if not self.session.division:
            return False, "Your profile has no division. Ask a manager to assign one."
        if report.division != self.session.division:
            return False, "Report does not match your division"

        try:
            rows = execute_update("""
                INSERT INTO performance_logs
                    (id, date, user_id, team_id, division, metric, value, meta, created_at)
                VALUES
                    (:id, :date, :user_id, NULL, :division, :metric, 1, :meta, :now)
            """, {
                'id': str(uuid.uuid4()),
                'date': today().isoformat(),
                'user_id': self.session.user_id,
                'division': report.division,
                'metric': DAILY_REPORT_METRIC,
                'meta': to_json(report.to_meta()),
                'now': now_timestamp(),
            })

            if rows > 0:
                clear_report_caches()
                logger.info(f"Daily report submitted by {self.session.email} ({report.division})")
                return True, "Daily report submitted"
            return False, "Failed to submit report"

        except Exception as e:
            logger.error(f"Error submitting daily report: {e}")
            return False, str(e)

    def record_performance_log(self, data: PerformanceLogCreate) -> Tuple[bool, str]:
        """Manual metric entry (manager only)"""
        try:
            self.access.ensure_can_write('performance_logs:manual')

            profile = execute_query(
                "SELECT division FROM users_meta WHERE id = :id", {'id': data.user_id}
            )
            if not profile:
                return False, "Selected employee no longer exists"

            meta = {'notes': data.notes, 'recorded_by': self.session.user_id}
            rows = execute_update("""
                INSERT INTO performance_logs
                    (id, date, user_id, team_id, division, metric, value, meta, created_at)
                VALUES
                    (:id, :date, :user_id, NULL, :division, :metric, :value, :meta, :now)
            """, {
                'id': str(uuid.uuid4()),
                'date': data.date.isoformat(),
                'user_id': data.user_id,
                'division': profile[0]['division'],
                'metric': data.metric,
                'value': float(data.value),
                'meta': to_json({k: v for k, v in meta.items() if v is not None}),
                'now': now_timestamp(),
            })

            if rows > 0:
                clear_report_caches()
                logger.info(f"Metric {data.metric}={data.value} recorded for {data.user_id}")
                return True, "Performance log recorded"
            return False, "Failed to record performance log"

        except PermissionDenied as e:
            return False, str(e)
        except Exception as e:
            logger.error(f"Error recording performance log: {e}")
            return False, str(e)


__all__ = [
    'load_daily_report_history',
    'load_daily_reports',
    'load_performance_logs',
    'clear_report_caches',
    'ReportQueries',
]
