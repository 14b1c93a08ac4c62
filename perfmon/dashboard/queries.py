# perfmon/dashboard/queries.py
"""
Data loading for the dashboard

Logs and targets are fetched for the selected range; scope filtering
and aggregation happen in pandas (see filters.py and metrics.py).
"""

import logging
from datetime import date

import pandas as pd
import streamlit as st

from ..config import config
from ..db import execute_query_df
from ..management.queries import load_accounts, load_employees, load_teams, load_team_members
from ..reports.queries import load_performance_logs

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = config.get_app_setting("CACHE_TTL_SECONDS", 300)


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_targets_in_range(start_date: date, end_date: date) -> pd.DataFrame:
    """KPI targets whose active period overlaps [start_date, end_date]"""
    query = """
        SELECT id, target_for_type, target_for_id, metric, target_value,
               period, start_date, end_date
        FROM kpi_targets
        WHERE start_date <= :end_date AND end_date >= :start_date
        ORDER BY metric, id
    """
    return execute_query_df(query, {
        'start_date': start_date.isoformat(),
        'end_date': end_date.isoformat(),
    })


class DashboardQueries:
    """
    Usage:
        queries = DashboardQueries()
        logs_df = queries.get_logs(start, end)
    """

    def get_logs(self, start_date: date, end_date: date) -> pd.DataFrame:
        return load_performance_logs(start_date=start_date, end_date=end_date)

    def get_targets(self, start_date: date, end_date: date) -> pd.DataFrame:
        return load_targets_in_range(start_date, end_date)

    def get_accounts(self) -> pd.DataFrame:
        return load_accounts()

    def get_employees(self) -> pd.DataFrame:
        return load_employees()

    def get_teams(self) -> pd.DataFrame:
        return load_teams()

    def get_team_members(self) -> pd.DataFrame:
        return load_team_members()
