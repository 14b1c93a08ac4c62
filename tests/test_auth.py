# tests/test_auth.py
from datetime import datetime, timedelta

from perfmon.auth import SESSION_KEY


def register(auth, email='ayu@example.com', username='ayu', **kwargs):
    return auth.sign_up(email, 'secret123', 'Ayu Lestari', username, **kwargs)


def test_sign_up_then_sign_in(db, auth):
    success, message = register(auth, division='konten_kreator')
    assert success
    assert 'Ayu Lestari' in message

    ok, user = auth.authenticate('AYU@example.com ', 'secret123')
    assert ok
    ctx = auth.login(user)

    assert auth.get_session() is ctx
    assert ctx.role == 'karyawan'
    assert ctx.division == 'konten_kreator'
    assert ctx.display_name == 'Ayu Lestari'
    assert ctx.initials == 'AL'
    assert not ctx.is_manager


def test_wrong_password(db, auth):
    register(auth)
    ok, result = auth.authenticate('ayu@example.com', 'nope')
    assert not ok
    assert result['error'] == "Invalid email or password"


def test_duplicates_rejected(db, auth):
    register(auth)
    assert register(auth, username='ayu2') == (False, "Email already registered")
    assert register(auth, email='other@example.com') == (False, "Username already taken")


def test_logout_clears_session(db, auth):
    register(auth)
    _, user = auth.authenticate('ayu@example.com', 'secret123')
    auth.login(user)

    auth.logout()
    assert SESSION_KEY not in auth._state
    assert auth.get_session() is None


def test_expired_session(db, auth):
    register(auth)
    _, user = auth.authenticate('ayu@example.com', 'secret123')
    user['login_time'] = datetime.now() - auth.session_timeout - timedelta(minutes=1)
    auth.login(user)

    assert auth.get_session() is None
    assert not auth.check_session()


def test_login_without_profile(db, auth):
    ctx = auth.login({'id': 'ghost', 'email': 'ghost@example.com'})
    assert not ctx.profile_loaded
    assert not ctx.is_manager
    assert ctx.display_name == 'ghost@example.com'
