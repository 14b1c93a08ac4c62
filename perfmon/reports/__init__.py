# perfmon/reports/__init__.py
"""
Daily Reports & Performance Logs

Components:
- queries: append-only inserts and cached loaders over performance_logs
- review: decoding stored daily reports for the manager review screen
- fragments: report form, history, review and log tables
"""

from .queries import (
    ReportQueries,
    load_daily_report_history,
    load_daily_reports,
    load_performance_logs,
    clear_report_caches,
)
from .review import ReviewRow, build_review_row, build_review_rows, UNKNOWN_USER

__all__ = [
    'ReportQueries',
    'load_daily_report_history',
    'load_daily_reports',
    'load_performance_logs',
    'clear_report_caches',
    'ReviewRow',
    'build_review_row',
    'build_review_rows',
    'UNKNOWN_USER',
]

__version__ = '1.0.0'
