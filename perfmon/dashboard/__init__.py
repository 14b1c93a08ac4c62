# perfmon/dashboard/__init__.py
"""
Dashboard Module

Components:
- queries: range-bounded loaders for logs and KPI targets
- filters: period presets and division / team / user scope
- metrics: aggregation (progress, scaled targets, achievement, series)
- charts: Altair visualizations and KPI cards
- export: formatted Excel report

Usage:
    from perfmon.dashboard import DashboardMetrics, resolve_period

    start, end = resolve_period('Last 7 days')
    metrics = DashboardMetrics(logs_df, targets_df, accounts_df, start, end)
"""

from .queries import DashboardQueries, load_targets_in_range
from .filters import (
    DashboardFilter,
    Scope,
    SCOPE_TYPES,
    resolve_period,
    resolve_scope,
    filter_logs,
    filter_targets,
    filter_accounts,
    drop_nested_targets,
    target_parents,
)
from .metrics import DashboardMetrics, expand_logs, scaled_target, calc_percentage
from .charts import DashboardCharts
from .export import DashboardExport, EXCEL_MIME

__all__ = [
    'DashboardQueries',
    'load_targets_in_range',
    'DashboardFilter',
    'Scope',
    'SCOPE_TYPES',
    'resolve_period',
    'resolve_scope',
    'filter_logs',
    'filter_targets',
    'filter_accounts',
    'drop_nested_targets',
    'target_parents',
    'DashboardMetrics',
    'expand_logs',
    'scaled_target',
    'calc_percentage',
    'DashboardCharts',
    'DashboardExport',
    'EXCEL_MIME',
]

__version__ = '1.0.0'
