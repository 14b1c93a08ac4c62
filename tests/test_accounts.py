# tests/test_accounts.py
import pytest

from perfmon.forms import AccountCreate, AccountUpdate, submit_form
from perfmon.management import queries as management_queries
from perfmon.management.queries import ManagementQueries, load_accounts

from .conftest import make_session


@pytest.fixture
def update_spy(monkeypatch):
    calls = []
    original = management_queries.execute_update

    def spy(query, params=None):
        calls.append(params)
        return original(query, params)

    monkeypatch.setattr(management_queries, 'execute_update', spy)
    return calls


def test_create_account_end_to_end(db, manager_session, update_spy):
    assert load_accounts().empty

    result = submit_form(
        AccountCreate,
        {'platform': 'tiktok', 'username': '@demo', 'account_type': 'affiliate', 'followers': 100},
        ManagementQueries(manager_session).create_account,
    )

    assert result.success
    assert len(update_spy) == 1
    assert update_spy[0]['keranjang_kuning'] is False

    accounts = load_accounts()
    assert len(accounts) == 1
    row = accounts.iloc[0]
    assert row['username'] == '@demo'
    assert row['platform'] == 'tiktok'
    assert row['followers'] == 100
    assert row['status'] == 'active'
    assert not row['keranjang_kuning']
    assert row['managed_by'] == manager_session.user_id


def test_non_manager_is_denied_before_any_sql(db, staff_session, update_spy):
    success, message = ManagementQueries(staff_session).create_account(AccountCreate(username='@demo'))

    assert not success
    assert 'permission' in message
    assert update_spy == []


def test_profile_less_session_is_denied(db, update_spy):
    session = make_session(role=None)
    success, _ = ManagementQueries(session).create_account(AccountCreate(username='@demo'))
    assert not success
    assert update_spy == []


def test_invalid_form_never_reaches_the_database(db, manager_session, update_spy):
    result = submit_form(
        AccountCreate, {'username': 'x', 'followers': -5},
        ManagementQueries(manager_session).create_account,
    )
    assert result.is_validation_error
    assert set(result.errors) == {'username', 'followers'}
    assert update_spy == []


def test_update_and_delete_account(db, manager_session):
    queries = ManagementQueries(manager_session)
    queries.create_account(AccountCreate(username='@demo', account_type='seller'))
    account_id = load_accounts().iloc[0]['id']

    success, _ = queries.update_account(
        account_id,
        AccountUpdate(username='@demo', account_type='seller', status='banned', keranjang_kuning=True),
    )
    assert success
    row = load_accounts().iloc[0]
    assert row['status'] == 'banned'
    assert row['account_type'] == 'seller'
    assert row['keranjang_kuning']

    success, _ = queries.delete_account(account_id)
    assert success
    assert load_accounts().empty


def test_update_missing_account(db, manager_session):
    success, message = ManagementQueries(manager_session).update_account(
        'missing', AccountUpdate(username='@demo'),
    )
    assert not success
    assert message == "Account not found"


def test_missing_followers_stored_as_zero(db, manager_session):
    result = submit_form(
        AccountCreate, {'username': '@demo', 'followers': None},
        ManagementQueries(manager_session).create_account,
    )
    assert result.success
    assert load_accounts().iloc[0]['followers'] == 0

    account_id = load_accounts().iloc[0]['id']
    result = submit_form(
        AccountUpdate, {'username': '@demo', 'followers': ''},
        lambda data: ManagementQueries(manager_session).update_account(account_id, data),
    )
    assert result.success
    assert load_accounts().iloc[0]['followers'] == 0
