# perfmon/dashboard/metrics.py
"""
Dashboard aggregation

Pure reductions over already-fetched rows:
- progress: sum of log values per metric
- targets: daily-period targets scaled by the number of days in range
- achievement: progress / target x 100, 0 when the target is 0
- trend: a fixed set of metrics bucketed by date
- comparison: one metric bucketed by user
- summary counters for the KPI cards

Daily reports are expanded through their typed payload first, so
video_count / post_count / live_duration_hours / total_sales count
as metrics of the same user and date.
"""

import logging
from datetime import date
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from ..constants import (
    ATTENTION_STATUSES, COMPARISON_METRIC, DAILY_REPORT_METRIC, TREND_METRICS,
)
from ..dates import as_date, days_in_range
from ..db import from_json
from ..forms import parse_report_meta

logger = logging.getLogger(__name__)

LOG_COLUMNS = ['date', 'user_id', 'user_name', 'metric', 'value']


def scaled_target(target_value: float, period: str, start_date: date, end_date: date) -> float:
    """Daily targets are multiplied by the inclusive day count of the range"""
    if period == 'daily':
        return float(target_value) * days_in_range(start_date, end_date)
    return float(target_value)


def calc_percentage(progress: float, target: float) -> float:
    if not target or target <= 0:
        return 0.0
    return float(progress) / float(target) * 100


def expand_logs(logs_df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per (date, user, metric, value), with daily report payloads
    exploded into their numeric fields.
    """
    if logs_df is None or logs_df.empty:
        return pd.DataFrame(columns=LOG_COLUMNS)

    records = []
    for row in logs_df.to_dict('records'):
        base = {
            'date': as_date(row['date']),
            'user_id': row.get('user_id'),
            'user_name': row.get('user_name') if isinstance(row.get('user_name'), str) else None,
        }
        records.append({**base, 'metric': row['metric'], 'value': float(row['value'] or 0)})

        if row['metric'] == DAILY_REPORT_METRIC:
            division = row.get('division') if isinstance(row.get('division'), str) else None
            report = parse_report_meta(division, from_json(row.get('meta')))
            if report is not None:
                for metric, value in report.numeric_metrics().items():
                    records.append({**base, 'metric': metric, 'value': value})

    return pd.DataFrame(records, columns=LOG_COLUMNS)


class DashboardMetrics:
    """
    KPI calculations for the dashboard.

    Usage:
        metrics = DashboardMetrics(logs_df, targets_df, accounts_df, start, end)
        summary = metrics.calculate_summary()
        goals = metrics.calculate_goal_progress()
    """

    def __init__(
        self,
        logs_df: pd.DataFrame,
        targets_df: pd.DataFrame = None,
        accounts_df: pd.DataFrame = None,
        start_date: date = None,
        end_date: date = None,
    ):
        self.raw_logs_df = logs_df if logs_df is not None else pd.DataFrame()
        self.logs_df = expand_logs(self.raw_logs_df)
        self.targets_df = targets_df if targets_df is not None else pd.DataFrame()
        self.accounts_df = accounts_df if accounts_df is not None else pd.DataFrame()
        self.start_date = start_date
        self.end_date = end_date

    # =========================================================================
    # PROGRESS & TARGETS
    # =========================================================================

    def calculate_progress(self) -> Dict[str, float]:
        """Sum of values per metric"""
        if self.logs_df.empty:
            return {}
        return self.logs_df.groupby('metric')['value'].sum().astype(float).to_dict()

    def calculate_goal_progress(self) -> pd.DataFrame:
        """One row per targeted metric: target, progress, achievement"""
        columns = ['metric', 'target', 'progress', 'achievement']
        if self.targets_df.empty:
            return pd.DataFrame(columns=columns)

        progress = self.calculate_progress()
        targets = self.targets_df.assign(
            scaled=[
                scaled_target(value, period, self.start_date, self.end_date)
                for value, period in zip(self.targets_df['target_value'], self.targets_df['period'])
            ]
        )
        grouped = targets.groupby('metric')['scaled'].sum()

        rows = []
        for metric, target in grouped.items():
            done = progress.get(metric, 0.0)
            rows.append({
                'metric': metric,
                'target': float(target),
                'progress': float(done),
                'achievement': calc_percentage(done, target),
            })
        return pd.DataFrame(rows, columns=columns)

    # =========================================================================
    # SERIES
    # =========================================================================

    def prepare_trend_series(self, metrics: Optional[List[str]] = None) -> pd.DataFrame:
        """Daily totals for each trend metric"""
        metrics = metrics or TREND_METRICS
        if self.logs_df.empty:
            return pd.DataFrame(columns=['date', 'metric', 'value'])

        df = self.logs_df[self.logs_df['metric'].isin(metrics)]
        return (
            df.groupby(['date', 'metric'], as_index=False)['value'].sum()
            .sort_values(['date', 'metric'])
            .reset_index(drop=True)
        )

    def prepare_comparison_series(self, metric: str = COMPARISON_METRIC) -> pd.DataFrame:
        """Totals of one metric per user, highest first"""
        if self.logs_df.empty:
            return pd.DataFrame(columns=['user_id', 'user_name', 'value'])

        df = self.logs_df[self.logs_df['metric'] == metric].copy()
        if df.empty:
            return pd.DataFrame(columns=['user_id', 'user_name', 'value'])

        df['user_name'] = df['user_name'].fillna('Unknown User')
        return (
            df.groupby(['user_id', 'user_name'], as_index=False, dropna=False)['value'].sum()
            .sort_values('value', ascending=False)
            .reset_index(drop=True)
        )

    def available_metrics(self) -> List[str]:
        if self.logs_df.empty:
            return []
        return sorted(self.logs_df['metric'].unique().tolist())

    # =========================================================================
    # SUMMARY
    # =========================================================================

    def calculate_summary(self) -> Dict:
        if self.accounts_df.empty and self.raw_logs_df.empty and self.targets_df.empty:
            return self._get_empty_metrics()

        accounts = self.accounts_df
        if accounts.empty:
            total_followers = 0
            active_accounts = 0
            attention_accounts = 0
        else:
            total_followers = int(pd.to_numeric(accounts['followers'], errors='coerce').fillna(0).sum())
            active_accounts = int((accounts['status'] == 'active').sum())
            attention_accounts = int(accounts['status'].isin(ATTENTION_STATUSES).sum())

        reports = 0
        if not self.raw_logs_df.empty:
            reports = int((self.raw_logs_df['metric'] == DAILY_REPORT_METRIC).sum())

        goals = self.calculate_goal_progress()
        score = float(np.mean(goals['achievement'])) if not goals.empty else 0.0

        return {
            'total_followers': total_followers,
            'active_accounts': active_accounts,
            'attention_accounts': attention_accounts,
            'reports_submitted': reports,
            'performance_score': score,
            'goals_count': len(goals),
        }

    @staticmethod
    def _get_empty_metrics() -> Dict:
        return {
            'total_followers': 0,
            'active_accounts': 0,
            'attention_accounts': 0,
            'reports_submitted': 0,
            'performance_score': 0.0,
            'goals_count': 0,
        }
