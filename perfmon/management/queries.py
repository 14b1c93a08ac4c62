# perfmon/management/queries.py
"""
SQL Queries and Mutations for the entity screens

Loaders are module-level functions cached with @st.cache_data and
cleared after every successful mutation on their table. Mutations live
on ManagementQueries, which checks the session role before any SQL is
issued and returns (success, message) tuples.

Lists are ordered newest first by a stable key.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

import pandas as pd
import streamlit as st

from ..access_control import AccessControl, PermissionDenied
from ..auth import AuthManager, SessionContext
from ..config import config
from ..dates import month_range
from ..db import execute_query, execute_query_df, execute_update, now_timestamp
from ..forms import (
    AccountCreate, AccountUpdate, EmployeeCreate, KpiTargetCreate,
    TutorialCreate, SopCreate, ToolCreate, ProductCreate,
)

logger = logging.getLogger(__name__)

CACHE_TTL_SECONDS = config.get_app_setting("CACHE_TTL_SECONDS", 300)


@dataclass(frozen=True)
class ContentType:
    """Create-then-list content table"""
    table: str
    label: str
    icon: str
    schema: Type
    link_field: Optional[str]


CONTENT_TYPES: Dict[str, ContentType] = {
    'tutorials': ContentType('tutorials', 'Tutorial', '📝', TutorialCreate, 'youtube_url'),
    'sops': ContentType('sops', 'SOP', '📄', SopCreate, 'file_path'),
    'tools': ContentType('tools', 'Tool', '🔧', ToolCreate, 'url'),
    'products': ContentType('products', 'Product', '📦', ProductCreate, 'spreadsheet_url'),
}


# =============================================================================
# CACHED LOADERS
# =============================================================================

@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_accounts() -> pd.DataFrame:
    """All accounts, newest first"""
    query = """
        SELECT id, platform, username, followers, account_type, status,
               keranjang_kuning, team_id, managed_by, notes, created_at, updated_at
        FROM accounts
        ORDER BY created_at DESC, id
    """
    df = execute_query_df(query)
    if not df.empty:
        df['keranjang_kuning'] = df['keranjang_kuning'].fillna(False).astype(bool)
    return df


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_employees() -> pd.DataFrame:
    """Profiles joined with their sign-in email, newest first"""
    query = """
        SELECT m.id, m.full_name, m.username, u.email, m.role, m.division,
               u.is_active, u.last_login, m.registered_at
        FROM users_meta m
        LEFT JOIN users u ON u.id = m.id
        ORDER BY m.registered_at DESC, m.id
    """
    return execute_query_df(query)


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_teams() -> pd.DataFrame:
    query = """
        SELECT id, name, description, division, created_at
        FROM teams
        ORDER BY name
    """
    return execute_query_df(query)


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_team_members() -> pd.DataFrame:
    query = """
        SELECT tm.team_id, tm.user_id, tm.role_in_team, t.division AS team_division
        FROM team_members tm
        JOIN teams t ON t.id = tm.team_id
    """
    return execute_query_df(query)


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_kpi_targets() -> pd.DataFrame:
    """KPI targets with a readable name for whoever they belong to"""
    query = """
        SELECT k.id, k.target_for_type, k.target_for_id,
               COALESCE(um.full_name, t.name, k.target_for_id) AS target_name,
               k.metric, k.target_value, k.period, k.start_date, k.end_date,
               k.created_by, k.created_at
        FROM kpi_targets k
        LEFT JOIN users_meta um
            ON k.target_for_type = 'user' AND um.id = k.target_for_id
        LEFT JOIN teams t
            ON k.target_for_type = 'team' AND t.id = k.target_for_id
        ORDER BY k.created_at DESC, k.id
    """
    return execute_query_df(query)


@st.cache_data(ttl=CACHE_TTL_SECONDS, show_spinner=False)
def load_content(kind: str) -> pd.DataFrame:
    """Rows of one content table, newest first"""
    table = CONTENT_TYPES[kind].table
    return execute_query_df(f"SELECT * FROM {table} ORDER BY created_at DESC, id")


# =============================================================================
# MUTATIONS
# =============================================================================

class ManagementQueries:
    """
    Mutations for accounts, employees, KPI targets and content.

    Usage:
        queries = ManagementQueries(session)
        success, message = queries.create_account(data)
    """

    def __init__(self, session: Optional[SessionContext], auth: Optional[AuthManager] = None):
        self.session = session
        self.access = AccessControl(session)
        self._auth = auth

    @property
    def auth(self) -> AuthManager:
        if self._auth is None:
            self._auth = AuthManager()
        return self._auth

    @property
    def actor(self) -> str:
        return self.session.user_id if self.session else 'system'

    # ------------------------------------------------------------------ accounts

    def create_account(self, data: AccountCreate) -> Tuple[bool, str]:
        try:
            self.access.ensure_can_write('accounts')
            now = now_timestamp()
            rows = execute_update("""
                INSERT INTO accounts
                    (id, platform, username, followers, account_type, status,
                     keranjang_kuning, managed_by, created_at, updated_at)
                VALUES
                    (:id, :platform, :username, :followers, :account_type, 'active',
                     :keranjang_kuning, :managed_by, :now, :now)
            """, {
                'id': str(uuid.uuid4()),
                'platform': data.platform,
                'username': data.username,
                'followers': data.followers,
                'account_type': data.account_type,
                'keranjang_kuning': bool(data.keranjang_kuning),
                'managed_by': self.actor,
                'now': now,
            })

            if rows > 0:
                load_accounts.clear()
                logger.info(f"Account {data.platform}/{data.username} created by {self.actor}")
                return True, "Account created successfully"
            return False, "Failed to create account"

        except PermissionDenied as e:
            return False, str(e)
        except Exception as e:
            logger.error(f"Error creating account: {e}")
            return False, str(e)

    def update_account(self, account_id: str, data: AccountUpdate) -> Tuple[bool, str]:
        try:
            self.access.ensure_can_write('accounts')
            rows = execute_update("""
                UPDATE accounts
                SET platform = :platform,
                    username = :username,
                    followers = :followers,
                    account_type = :account_type,
                    status = :status,
                    keranjang_kuning = :keranjang_kuning,
                    updated_at = :now
                WHERE id = :id
            """, {
                'id': account_id,
                'platform': data.platform,
                'username': data.username,
                'followers': data.followers,
                'account_type': data.account_type,
                'status': data.status,
                'keranjang_kuning': bool(data.keranjang_kuning),
                'now': now_timestamp(),
            })

            if rows > 0:
                load_accounts.clear()
                logger.info(f"Account {account_id} updated by {self.actor}")
                return True, "Account updated successfully"
            return False, "Account not found"

        except PermissionDenied as e:
            return False, str(e)
        except Exception as e:
            logger.error(f"Error updating account: {e}")
            return False, str(e)

    def delete_account(self, account_id: str) -> Tuple[bool, str]:
        try:
            self.access.ensure_can_write('accounts')
            rows = execute_update("DELETE FROM accounts WHERE id = :id", {'id': account_id})

            if rows > 0:
                load_accounts.clear()
                logger.info(f"Account {account_id} deleted by {self.actor}")
                return True, "Account deleted"
            return False, "Account not found"

        except PermissionDenied as e:
            return False, str(e)
        except Exception as e:
            logger.error(f"Error deleting account: {e}")
            return False, str(e)

    # ----------------------------------------------------------------- employees

    def create_employee(self, data: EmployeeCreate) -> Tuple[bool, str]:
        try:
            self.access.ensure_can_write('users_meta')
        except PermissionDenied as e:
            return False, str(e)

        success, message = self.auth.sign_up(
            email=data.email,
            password=data.password,
            full_name=data.full_name,
            username=data.username,
            role=data.role,
            division=data.division,
        )
        if success:
            load_employees.clear()
        return success, message

    # --------------------------------------------------------------- KPI targets

    def _target_exists(self, target_for_type: str, target_for_id: str) -> bool:
        if target_for_type == 'user':
            return bool(execute_query(
                "SELECT 1 AS found FROM users_meta WHERE id = :id", {'id': target_for_id}
            ))
        if target_for_type == 'team':
            return bool(execute_query(
                "SELECT 1 AS found FROM teams WHERE id = :id", {'id': target_for_id}
            ))
        return True

    def create_kpi_target(self, data: KpiTargetCreate) -> Tuple[bool, str]:
        try:
            self.access.ensure_can_write('kpi_targets')
            target_for_type, target_for_id = data.target.as_columns()

            if not self._target_exists(target_for_type, target_for_id):
                return False, f"Selected {target_for_type} no longer exists"

            start_date, end_date = month_range()
            now = now_timestamp()
            rows = execute_update("""
                INSERT INTO kpi_targets
                    (id, target_for_type, target_for_id, metric, target_value, period,
                     start_date, end_date, created_by, created_at, updated_at)
                VALUES
                    (:id, :target_for_type, :target_for_id, :metric, :target_value, :period,
                     :start_date, :end_date, :created_by, :now, :now)
            """, {
                'id': str(uuid.uuid4()),
                'target_for_type': target_for_type,
                'target_for_id': target_for_id,
                'metric': data.metric,
                'target_value': float(data.target_value),
                'period': data.period,
                'start_date': start_date.isoformat(),
                'end_date': end_date.isoformat(),
                'created_by': self.actor,
                'now': now,
            })

            if rows > 0:
                load_kpi_targets.clear()
                logger.info(f"KPI target {data.metric} for {target_for_type}:{target_for_id} created")
                return True, "KPI target created successfully"
            return False, "Failed to create KPI target"

        except PermissionDenied as e:
            return False, str(e)
        except Exception as e:
            logger.error(f"Error creating KPI target: {e}")
            return False, str(e)

    # ------------------------------------------------------------------- content

    def create_content(self, kind: str, data) -> Tuple[bool, str]:
        content = CONTENT_TYPES[kind]
        try:
            self.access.ensure_can_write(content.table)

            values = data.model_dump()
            if 'is_public' in values:
                values['is_public'] = bool(values['is_public'])
            columns: List[str] = list(values.keys())

            now = now_timestamp()
            params = dict(values, id=str(uuid.uuid4()), created_by=self.actor, now=now)
            query = (
                f"INSERT INTO {content.table} "
                f"(id, {', '.join(columns)}, created_by, created_at, updated_at) "
                f"VALUES (:id, {', '.join(':' + c for c in columns)}, :created_by, :now, :now)"
            )
            rows = execute_update(query, params)

            if rows > 0:
                load_content.clear()
                logger.info(f"{content.label} '{values.get('title')}' created by {self.actor}")
                return True, f"{content.label} created successfully"
            return False, f"Failed to create {content.label.lower()}"

        except PermissionDenied as e:
            return False, str(e)
        except Exception as e:
            logger.error(f"Error creating {content.label.lower()}: {e}")
            return False, str(e)


__all__ = [
    'ContentType', 'CONTENT_TYPES',
    'load_accounts', 'load_employees', 'load_teams', 'load_team_members',
    'load_kpi_targets', 'load_content',
    'ManagementQueries',
]
