# tests/test_forms.py
from datetime import date

import pytest

from perfmon.forms import (
    AccountCreate, AccountUpdate, EmployeeCreate, KpiTargetCreate,
    TutorialCreate, SopCreate, ToolCreate, ProductCreate, PerformanceLogCreate,
    DAILY_REPORT_ADAPTER, HostLiveReport, CreatorReport, ModelReport, ManagerReport,
    DivisionTarget, TeamTarget, UserTarget,
    parse_report_meta, submit_form, target_payload, validate_form,
)


class TestAccountForm:
    def test_defaults(self):
        data, errors = validate_form(AccountCreate, {'username': '@demo'})
        assert errors == {}
        assert data.platform == 'tiktok'
        assert data.account_type == 'affiliate'
        assert data.followers == 0
        assert data.keranjang_kuning is False

    def test_short_username_rejected(self):
        data, errors = validate_form(AccountCreate, {'username': 'a'})
        assert data is None
        assert 'username' in errors

    def test_negative_followers_rejected(self):
        _, errors = validate_form(AccountCreate, {'username': '@demo', 'followers': -1})
        assert 'followers' in errors

    def test_blank_followers_default_to_zero(self):
        for blank in (None, '', '  '):
            data, errors = validate_form(AccountCreate, {'username': '@demo', 'followers': blank})
            assert errors == {}
            assert data.followers == 0

    def test_unknown_platform_rejected(self):
        _, errors = validate_form(AccountCreate, {'username': '@demo', 'platform': 'myspace'})
        assert 'platform' in errors

    def test_update_status(self):
        data, errors = validate_form(AccountUpdate, {'username': '@demo', 'status': 'banned'})
        assert errors == {}
        assert data.status == 'banned'

        _, errors = validate_form(AccountUpdate, {'username': '@demo', 'status': 'frozen'})
        assert 'status' in errors


class TestEmployeeForm:
    def test_valid(self):
        data, errors = validate_form(EmployeeCreate, {
            'full_name': 'Budi', 'username': 'budi', 'email': 'Budi@Example.com', 'password': 'secret1',
        })
        assert errors == {}
        assert data.email == 'budi@example.com'
        assert data.role == 'karyawan'
        assert data.division == 'konten_kreator'

    def test_rules(self):
        _, errors = validate_form(EmployeeCreate, {
            'full_name': 'B', 'username': 'bu', 'email': 'not-an-email', 'password': '123',
        })
        assert set(errors) == {'full_name', 'username', 'email', 'password'}
        assert errors['email'] == 'Invalid email address'

    def test_blank_division_is_none(self):
        data, _ = validate_form(EmployeeCreate, {
            'full_name': 'Budi', 'username': 'budi', 'email': 'b@x.io', 'password': 'secret1',
            'division': '',
        })
        assert data.division is None


class TestKpiTargetForm:
    def test_tagged_targets(self):
        for kind, ident, cls in [('user', 'u-1', UserTarget), ('team', 't-1', TeamTarget),
                                 ('division', 'model', DivisionTarget)]:
            data, errors = validate_form(KpiTargetCreate, {
                'target': target_payload(kind, ident), 'metric': 'video_count', 'target_value': 10,
            })
            assert errors == {}
            assert isinstance(data.target, cls)
            assert data.target.as_columns() == (kind, ident)
            assert data.period == 'monthly'

    def test_missing_target_rejected(self):
        _, errors = validate_form(KpiTargetCreate, {
            'target': target_payload('user', None), 'metric': 'video_count', 'target_value': 10,
        })
        assert 'user_id' in errors

    def test_target_value_and_metric(self):
        _, errors = validate_form(KpiTargetCreate, {
            'target': target_payload('division', 'model'), 'metric': 'vc', 'target_value': 0,
        })
        assert 'metric' in errors
        assert 'target_value' in errors


class TestContentForms:
    def test_tutorial_optional_urls(self):
        data, errors = validate_form(TutorialCreate, {'title': 'Editing 101', 'youtube_url': '', 'file_path': ''})
        assert errors == {}
        assert data.youtube_url is None
        assert data.file_path is None
        assert data.is_public is False

    def test_tutorial_bad_url(self):
        _, errors = validate_form(TutorialCreate, {'title': 'Editing 101', 'youtube_url': 'not a url'})
        assert errors['youtube_url'] == 'Invalid URL'

    def test_required_urls(self):
        _, errors = validate_form(SopCreate, {'title': 'Posting SOP', 'file_path': ''})
        assert 'file_path' in errors
        _, errors = validate_form(ToolCreate, {'title': 'CapCut'})
        assert 'url' in errors
        _, errors = validate_form(ProductCreate, {'title': 'Catalogue', 'spreadsheet_url': 'x'})
        assert 'spreadsheet_url' in errors

    def test_title_lengths(self):
        assert 'title' in validate_form(TutorialCreate, {'title': 'abcd'})[1]
        assert 'title' in validate_form(ToolCreate, {'title': 'ab', 'url': 'https://a.io'})[1]
        assert validate_form(ToolCreate, {'title': 'abc', 'url': 'https://a.io'})[1] == {}


class TestDailyReport:
    def test_host_live_requires_non_negative_numbers(self):
        _, errors = validate_form(DAILY_REPORT_ADAPTER, {
            'division': 'host_live', 'live_duration_hours': -1, 'total_sales': -5,
        })
        assert set(errors) == {'live_duration_hours', 'total_sales'}

    def test_host_live_notes_optional(self):
        report, errors = validate_form(DAILY_REPORT_ADAPTER, {
            'division': 'host_live', 'live_duration_hours': 2.5, 'total_sales': 150000,
        })
        assert errors == {}
        assert isinstance(report, HostLiveReport)
        assert report.notes is None
        assert report.to_meta() == {'live_duration_hours': 2.5, 'total_sales': 150000.0}

    def test_variant_per_division(self):
        assert isinstance(DAILY_REPORT_ADAPTER.validate_python(
            {'division': 'konten_kreator', 'video_count': 3, 'post_count': 1}), CreatorReport)
        assert isinstance(DAILY_REPORT_ADAPTER.validate_python(
            {'division': 'model', 'project_name': 'Shoot A'}), ModelReport)
        assert isinstance(DAILY_REPORT_ADAPTER.validate_python({'division': 'manager'}), ManagerReport)

    def test_model_project_name(self):
        _, errors = validate_form(DAILY_REPORT_ADAPTER, {'division': 'model', 'project_name': 'ab'})
        assert 'project_name' in errors

    def test_missing_division_rejected(self):
        report, errors = validate_form(DAILY_REPORT_ADAPTER, {'notes': 'hello'})
        assert report is None
        assert errors

    def test_notes_kept_in_meta(self):
        report = DAILY_REPORT_ADAPTER.validate_python({'division': 'manager', 'notes': 'All good'})
        assert report.to_meta() == {'notes': 'All good'}

    def test_parse_report_meta(self):
        report = parse_report_meta('konten_kreator', {'video_count': 2, 'post_count': 4})
        assert report.numeric_metrics() == {'video_count': 2.0, 'post_count': 4.0}
        assert parse_report_meta('konten_kreator', {'bogus': 1}) is None
        assert parse_report_meta(None, {'video_count': 1}) is None


def test_performance_log_form():
    data, errors = validate_form(PerformanceLogCreate, {
        'date': date(2026, 10, 1), 'user_id': 'u-1', 'metric': 'video_count', 'value': 3, 'notes': '',
    })
    assert errors == {}
    assert data.notes is None
    assert 'value' in validate_form(PerformanceLogCreate, {
        'date': '2026-10-01', 'user_id': 'u-1', 'metric': 'video_count', 'value': -1,
    })[1]


class TestSubmitForm:
    def test_invalid_payload_never_calls_mutation(self):
        calls = []

        def mutate(data):
            calls.append(data)
            return True, "ok"

        result = submit_form(AccountCreate, {'username': ''}, mutate)
        assert result.success is False
        assert result.is_validation_error
        assert calls == []

    def test_valid_payload_calls_mutation_once(self):
        calls = []

        def mutate(data):
            calls.append(data)
            return False, "duplicate key"

        result = submit_form(AccountCreate, {'username': '@demo'}, mutate)
        assert len(calls) == 1
        assert result.success is False
        assert result.message == "duplicate key"
        assert result.errors == {}
