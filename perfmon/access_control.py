# perfmon/access_control.py
"""
Access Control for the Performance Monitor

Single place where authorization is decided:

- Page level: manager-only pages are blocked for everyone else
  (static message, nothing else rendered).
- Data level: mutations on manager-only tables call ensure_can_write()
  before any SQL is issued.

Usage:
    access = AccessControl(session)
    if access.can_write('accounts'):
        ...
"""

import logging
from typing import Optional

import streamlit as st

from .auth import SessionContext

logger = logging.getLogger(__name__)

# Tables only managers may write to
MANAGER_WRITE_TABLES = frozenset([
    'accounts',
    'kpi_targets',
    'users_meta',
    'tutorials',
    'sops',
    'tools',
    'products',
    'performance_logs:manual',
])

# Access decisions
ALLOW = 'allow'
LOGIN = 'login'
DENIED = 'denied'


class PermissionDenied(Exception):
    """Raised when the session may not perform a mutation"""


def evaluate_access(session: Optional[SessionContext], requires_manager: bool = False) -> str:
    """
    Decide what a page should do for this session.

    Returns:
        'login' when signed out, 'denied' for a non-manager on a
        manager-only page, otherwise 'allow'
    """
    if session is None:
        return LOGIN
    if requires_manager and not session.is_manager:
        return DENIED
    return ALLOW


class AccessControl:
    """Role checks for the current session"""

    def __init__(self, session: Optional[SessionContext]):
        self.session = session

    @property
    def user_role(self) -> Optional[str]:
        return self.session.role if self.session else None

    def is_manager(self) -> bool:
        return bool(self.session and self.session.is_manager)

    # =========================================================================
    # PAGE-LEVEL ACCESS
    # =========================================================================

    def can_access_page(self, requires_manager: bool = False) -> bool:
        return evaluate_access(self.session, requires_manager) == ALLOW

    # =========================================================================
    # DATA-LEVEL ACCESS
    # =========================================================================

    def can_write(self, table: str) -> bool:
        if self.session is None:
            return False
        if table in MANAGER_WRITE_TABLES:
            return self.session.is_manager
        return True

    def ensure_can_write(self, table: str):
        if not self.can_write(table):
            logger.warning(
                f"Blocked write to {table} by "
                f"{self.session.email if self.session else 'anonymous'} (role: {self.user_role})"
            )
            raise PermissionDenied("You do not have permission to perform this action")

    def can_export(self) -> bool:
        return self.is_manager()

    # =========================================================================
    # MESSAGES
    # =========================================================================

    def get_denied_message(self) -> str:
        return (
            f"⚠️ Access Denied. Your role ({self.user_role or 'unknown'}) does not have "
            f"permission to view this page. Required role: manager"
        )

    def __repr__(self) -> str:
        return f"AccessControl(role={self.user_role})"


def guard_page(auth, requires_manager: bool = False) -> SessionContext:
    """
    Gate a page. Redirects to sign-in or stops with a static message;
    returns the session context when the page may render.
    """
    session = auth.get_session()
    decision = evaluate_access(session, requires_manager)

    if decision == LOGIN:
        st.switch_page("app.py")
        st.stop()
    if decision == DENIED:
        st.error(AccessControl(session).get_denied_message())
        st.stop()

    return session


__all__ = [
    'AccessControl',
    'PermissionDenied',
    'evaluate_access',
    'guard_page',
    'MANAGER_WRITE_TABLES',
    'ALLOW',
    'LOGIN',
    'DENIED',
]
