# tests/test_filters.py
from datetime import date

import pandas as pd
import pytest

from perfmon.dashboard.filters import (
    DashboardFilter, filter_logs, filter_targets, resolve_period, resolve_scope, target_parents,
)
from perfmon.dashboard.metrics import DashboardMetrics

TODAY = date(2026, 10, 19)

EMPLOYEES = pd.DataFrame([
    {'id': 'u1', 'full_name': 'Ayu', 'division': 'konten_kreator'},
    {'id': 'u2', 'full_name': 'Hana', 'division': 'host_live'},
    {'id': 'u3', 'full_name': 'Citra', 'division': 'konten_kreator'},
])
TEAMS = pd.DataFrame([
    {'id': 't1', 'name': 'Creators A', 'division': 'konten_kreator'},
    {'id': 't2', 'name': 'Hosts', 'division': 'host_live'},
])
MEMBERS = pd.DataFrame([
    {'team_id': 't1', 'user_id': 'u1'},
    {'team_id': 't2', 'user_id': 'u2'},
])
TARGETS = pd.DataFrame([
    {'target_for_type': 'user', 'target_for_id': 'u1', 'metric': 'video_count'},
    {'target_for_type': 'user', 'target_for_id': 'u2', 'metric': 'total_sales'},
    {'target_for_type': 'team', 'target_for_id': 't1', 'metric': 'post_count'},
    {'target_for_type': 'division', 'target_for_id': 'konten_kreator', 'metric': 'video_count'},
    {'target_for_type': 'division', 'target_for_id': 'host_live', 'metric': 'live_duration_hours'},
])
LOGS = pd.DataFrame([
    {'user_id': 'u1', 'team_id': None, 'division': 'konten_kreator', 'metric': 'video_count'},
    {'user_id': 'u2', 'team_id': None, 'division': 'host_live', 'metric': 'total_sales'},
    {'user_id': 'u3', 'team_id': None, 'division': 'konten_kreator', 'metric': 'post_count'},
])


class TestResolvePeriod:
    def test_presets(self):
        assert resolve_period('Today', TODAY) == (TODAY, TODAY)
        assert resolve_period('Last 7 days', TODAY) == (date(2026, 10, 13), TODAY)
        assert resolve_period('This month', TODAY) == (date(2026, 10, 1), TODAY)

    def test_custom_range_is_ordered(self):
        assert resolve_period('Custom', TODAY, date(2026, 9, 30), date(2026, 9, 1)) == (
            date(2026, 9, 1), date(2026, 9, 30))


def scope_for(scope_type, scope_id):
    flt = DashboardFilter(TODAY, TODAY, scope_type, scope_id)
    return resolve_scope(flt, EMPLOYEES, TEAMS, MEMBERS)


def test_all_scope_keeps_every_log():
    scope = scope_for('all', None)
    assert len(filter_logs(LOGS, scope)) == 3
    # u1's video_count target is covered by the konten_kreator one
    assert len(filter_targets(TARGETS, scope)) == 4


def test_user_scope():
    scope = scope_for('user', 'u1')
    assert filter_logs(LOGS, scope)['user_id'].tolist() == ['u1']
    assert filter_targets(TARGETS, scope)['target_for_id'].tolist() == ['u1']


def test_team_scope_includes_member_targets():
    scope = scope_for('team', 't1')
    assert filter_logs(LOGS, scope)['user_id'].tolist() == ['u1']
    assert set(filter_targets(TARGETS, scope)['target_for_id']) == {'t1', 'u1'}


def test_division_scope_covers_teams_and_users():
    scope = scope_for('division', 'konten_kreator')
    assert set(filter_logs(LOGS, scope)['user_id']) == {'u1', 'u3'}
    assert set(filter_targets(TARGETS, scope)['target_for_id']) == {'konten_kreator', 't1'}


def test_parents_of_users_and_teams():
    parents = target_parents(EMPLOYEES, TEAMS, MEMBERS)
    assert parents[('user', 'u1')] == {('division', 'konten_kreator'), ('team', 't1')}
    assert parents[('team', 't2')] == {('division', 'host_live')}
    assert parents[('user', 'u3')] == {('division', 'konten_kreator')}


class TestNestedTargets:
    START = date(2026, 10, 1)
    END = date(2026, 10, 7)

    def daily(self, kind, ident, metric='live_duration_hours', value=2):
        return {
            'target_for_type': kind, 'target_for_id': ident, 'metric': metric,
            'target_value': value, 'period': 'daily',
            'start_date': self.START.isoformat(), 'end_date': self.END.isoformat(),
        }

    def goals(self, targets, scope_type, scope_id):
        flt = DashboardFilter(self.START, self.END, scope_type, scope_id)
        scope = resolve_scope(flt, EMPLOYEES, TEAMS, MEMBERS)
        logs = pd.DataFrame([{
            'date': '2026-10-02', 'user_id': 'u2', 'user_name': 'Hana', 'team_id': None,
            'division': 'host_live', 'metric': 'live_duration_hours', 'value': 2.5, 'meta': None,
        }])
        metrics = DashboardMetrics(
            filter_logs(logs, scope), filter_targets(pd.DataFrame(targets), scope),
            start_date=self.START, end_date=self.END,
        )
        return metrics.calculate_goal_progress().set_index('metric')

    def test_division_target_not_summed_with_member_target(self):
        targets = [self.daily('division', 'host_live'), self.daily('user', 'u2')]
        for scope_type, scope_id in [('division', 'host_live'), ('all', None), ('user', 'u2')]:
            goals = self.goals(targets, scope_type, scope_id)
            assert goals.loc['live_duration_hours', 'target'] == 14
            assert goals.loc['live_duration_hours', 'achievement'] == pytest.approx(2.5 / 14 * 100)

    def test_team_target_covers_member_target(self):
        targets = [self.daily('team', 't2'), self.daily('user', 'u2', value=5)]
        goals = self.goals(targets, 'team', 't2')
        assert goals.loc['live_duration_hours', 'target'] == 14

    def test_member_targets_summed_without_scope_target(self):
        targets = [self.daily('user', 'u2'), self.daily('user', 'u1', metric='video_count')]
        goals = self.goals(targets + [self.daily('team', 't2', metric='total_sales')], 'division', 'host_live')
        assert goals.loc['live_duration_hours', 'target'] == 14
        assert goals.loc['total_sales', 'target'] == 14
        assert 'video_count' not in goals.index
