# perfmon/dashboard/filters.py
"""
Dashboard filters: time range presets and scope (division / team / user)

Scope resolution turns a filter into the sets used to match
performance logs and KPI targets:

- user: that user's logs; that user's targets
- team: logs of the team or its members; team target + member targets
- division: logs of the division; division target + targets of its
  teams and users

A target is dropped when an enclosing team or division has its own
target for the same metric, so nested targets are never summed twice.
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, FrozenSet, Optional, Set, Tuple

import pandas as pd
import streamlit as st

from ..auth import SessionContext
from ..constants import PERIOD_PRESETS, DIVISIONS, DIVISION_LABELS
from ..dates import month_range, today

SCOPE_ALL = 'all'
SCOPE_TYPES = [SCOPE_ALL, 'division', 'team', 'user']


@dataclass(frozen=True)
class DashboardFilter:
    start_date: date
    end_date: date
    scope_type: str = SCOPE_ALL
    scope_id: Optional[str] = None
    preset: str = 'This month'

    @property
    def is_all(self) -> bool:
        return self.scope_type == SCOPE_ALL or not self.scope_id


TargetKey = Tuple[str, str]


@dataclass(frozen=True)
class Scope:
    """Resolved scope; None sets mean unrestricted"""
    user_ids: Optional[FrozenSet[str]] = None
    team_ids: Optional[FrozenSet[str]] = None
    division: Optional[str] = None
    target_keys: Optional[FrozenSet[TargetKey]] = None
    # target key -> team / division keys that contain it
    parents: Dict[TargetKey, FrozenSet[TargetKey]] = field(default_factory=dict, compare=False)


def resolve_period(
    preset: str,
    reference: Optional[date] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> Tuple[date, date]:
    """
    Start and end dates (inclusive) for a preset.

    'This month' runs from the first of the month to the reference day.
    """
    reference = reference or today()

    if preset == 'Today':
        return reference, reference
    if preset == 'Last 7 days':
        return reference - timedelta(days=6), reference
    if preset == 'Custom' and custom_start and custom_end:
        if custom_start > custom_end:
            custom_start, custom_end = custom_end, custom_start
        return custom_start, custom_end

    start, _ = month_range(reference)
    return start, reference


def target_parents(
    employees_df: pd.DataFrame,
    teams_df: pd.DataFrame,
    members_df: pd.DataFrame,
) -> Dict[TargetKey, FrozenSet[TargetKey]]:
    """Team and division keys enclosing each user and team"""
    team_division = {}
    if not teams_df.empty:
        team_division = {
            team_id: division
            for team_id, division in zip(teams_df['id'], teams_df['division'])
            if isinstance(division, str)
        }

    parents: Dict[TargetKey, Set[TargetKey]] = {}
    for team_id, division in team_division.items():
        parents.setdefault(('team', team_id), set()).add(('division', division))

    if not employees_df.empty:
        for user_id, division in zip(employees_df['id'], employees_df['division']):
            if isinstance(division, str):
                parents.setdefault(('user', user_id), set()).add(('division', division))

    if not members_df.empty:
        for team_id, user_id in zip(members_df['team_id'], members_df['user_id']):
            user_parents = parents.setdefault(('user', user_id), set())
            user_parents.add(('team', team_id))
            if team_id in team_division:
                user_parents.add(('division', team_division[team_id]))

    return {key: frozenset(value) for key, value in parents.items()}


def resolve_scope(
    flt: DashboardFilter,
    employees_df: pd.DataFrame,
    teams_df: pd.DataFrame,
    members_df: pd.DataFrame,
) -> Scope:
    parents = target_parents(employees_df, teams_df, members_df)

    if flt.is_all:
        return Scope(parents=parents)

    if flt.scope_type == 'user':
        return Scope(
            user_ids=frozenset([flt.scope_id]),
            target_keys=frozenset([('user', flt.scope_id)]),
            parents=parents,
        )

    if flt.scope_type == 'team':
        members = set()
        if not members_df.empty:
            members = set(members_df.loc[members_df['team_id'] == flt.scope_id, 'user_id'])
        keys = {('team', flt.scope_id)} | {('user', u) for u in members}
        return Scope(
            user_ids=frozenset(members),
            team_ids=frozenset([flt.scope_id]),
            target_keys=frozenset(keys),
            parents=parents,
        )

    # division
    division = flt.scope_id
    users = set()
    if not employees_df.empty:
        users = set(employees_df.loc[employees_df['division'] == division, 'id'])
    teams = set()
    if not teams_df.empty:
        teams = set(teams_df.loc[teams_df['division'] == division, 'id'])
    keys = {('division', division)} | {('team', t) for t in teams} | {('user', u) for u in users}
    return Scope(
        user_ids=frozenset(users),
        team_ids=frozenset(teams),
        division=division,
        target_keys=frozenset(keys),
        parents=parents,
    )


def filter_logs(logs_df: pd.DataFrame, scope: Scope) -> pd.DataFrame:
    if logs_df.empty or scope.target_keys is None:
        return logs_df

    if scope.division is not None:
        mask = logs_df['division'] == scope.division
    else:
        mask = logs_df['user_id'].isin(scope.user_ids or set())
        if scope.team_ids:
            mask = mask | logs_df['team_id'].isin(scope.team_ids)
    return logs_df[mask]


def drop_nested_targets(
    targets_df: pd.DataFrame,
    parents: Dict[TargetKey, FrozenSet[TargetKey]],
) -> pd.DataFrame:
    """Drop targets whose team or division has its own target for the same metric"""
    if targets_df.empty or not parents:
        return targets_df

    present = set(zip(targets_df['target_for_type'], targets_df['target_for_id'], targets_df['metric']))
    mask = [
        not any((p_type, p_id, metric) in present for p_type, p_id in parents.get((kind, ident), ()))
        for kind, ident, metric in zip(
            targets_df['target_for_type'], targets_df['target_for_id'], targets_df['metric']
        )
    ]
    return targets_df[mask]


def filter_targets(targets_df: pd.DataFrame, scope: Scope) -> pd.DataFrame:
    if targets_df.empty:
        return targets_df

    if scope.target_keys is not None:
        keys = list(zip(targets_df['target_for_type'], targets_df['target_for_id']))
        targets_df = targets_df[[key in scope.target_keys for key in keys]]
    return drop_nested_targets(targets_df, scope.parents)


def filter_accounts(accounts_df: pd.DataFrame, scope: Scope) -> pd.DataFrame:
    """Accounts follow team scope; other scopes see every account"""
    if accounts_df.empty or not scope.team_ids or scope.division is not None:
        return accounts_df
    return accounts_df[accounts_df['team_id'].isin(scope.team_ids)]


# =============================================================================
# SIDEBAR
# =============================================================================

def render_filters(
    session: SessionContext,
    employees_df: pd.DataFrame,
    teams_df: pd.DataFrame,
) -> DashboardFilter:
    with st.sidebar:
        st.header("🔍 Filters")

        preset = st.selectbox("Period", PERIOD_PRESETS, index=PERIOD_PRESETS.index('This month'))
        custom_start = custom_end = None
        if preset == 'Custom':
            default_start, default_end = month_range()
            picked = st.date_input("Date range", value=(default_start, default_end))
            if isinstance(picked, (list, tuple)) and len(picked) == 2:
                custom_start, custom_end = picked
        start_date, end_date = resolve_period(preset, custom_start=custom_start, custom_end=custom_end)

        if not session.is_manager:
            # Non-managers always see their own numbers
            return DashboardFilter(start_date, end_date, 'user', session.user_id, preset)

        scope_type = st.selectbox("Scope", SCOPE_TYPES, format_func=str.title)
        scope_id = None
        if scope_type == 'division':
            scope_id = st.selectbox("Division", DIVISIONS, format_func=lambda d: DIVISION_LABELS.get(d, d))
        elif scope_type == 'team':
            options = dict(zip(teams_df['id'], teams_df['name'])) if not teams_df.empty else {}
            scope_id = st.selectbox("Team", list(options), format_func=lambda k: options.get(k, k), index=None)
        elif scope_type == 'user':
            options = dict(zip(employees_df['id'], employees_df['full_name'])) if not employees_df.empty else {}
            scope_id = st.selectbox("Employee", list(options), format_func=lambda k: options.get(k, k), index=None)

        return DashboardFilter(start_date, end_date, scope_type, scope_id, preset)
