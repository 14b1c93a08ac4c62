# tests/conftest.py
import os

# Must be set before perfmon.config is imported
os.environ["DB_URL"] = "sqlite://"
os.environ.setdefault("TIMEZONE", "Asia/Jakarta")

from datetime import datetime

import pytest
import streamlit as st

from perfmon.auth import AuthManager, SessionContext, UserProfile
from perfmon.schema import create_all, drop_all


@pytest.fixture(autouse=True)
def clear_caches():
    st.cache_data.clear()
    yield
    st.cache_data.clear()


@pytest.fixture
def db():
    create_all()
    yield
    drop_all()


@pytest.fixture
def auth():
    return AuthManager(state={})


def make_session(user_id="u-1", role="manager", division="manager", full_name="Maya Manager"):
    profile = None
    if role is not None:
        profile = UserProfile(
            id=user_id,
            full_name=full_name,
            username=full_name.split()[0].lower(),
            role=role,
            division=division,
        )
    return SessionContext(
        user_id=user_id,
        email=f"{user_id}@example.com",
        login_time=datetime.now(),
        profile=profile,
    )


@pytest.fixture
def manager_session():
    return make_session()


@pytest.fixture
def staff_session():
    return make_session(user_id="u-2", role="karyawan", division="host_live", full_name="Hana Host")
