# perfmon/management/__init__.py
"""
Entity Management Module

List + form screens for employees, accounts, KPI targets and content
(tutorials, SOPs, tools, products).

Components:
- queries: cached list loaders and role-checked mutations
- fragments: forms, tables and cards

Usage:
    from perfmon.management import ManagementQueries, load_accounts

    queries = ManagementQueries(session)
    success, message = queries.create_account(data)
"""

from .queries import (
    ContentType,
    CONTENT_TYPES,
    ManagementQueries,
    load_accounts,
    load_employees,
    load_teams,
    load_team_members,
    load_kpi_targets,
    load_content,
)

__all__ = [
    'ContentType',
    'CONTENT_TYPES',
    'ManagementQueries',
    'load_accounts',
    'load_employees',
    'load_teams',
    'load_team_members',
    'load_kpi_targets',
    'load_content',
]

__version__ = '1.0.0'
