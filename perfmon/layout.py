# perfmon/layout.py
"""
Shared page scaffolding

- PAGES: navigation registry (manager-only entries hidden from others)
- setup_page(): page config + auth guard + database check + sidebar
- ListState / resolve_list_state(): empty / error / ok for list views (spinner while loading)
- show_form_result(): per-field validation errors or the backend message
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional

import pandas as pd
import streamlit as st

from .access_control import guard_page
from .auth import AuthManager, SessionContext
from .constants import ROLE_LABELS, DIVISION_LABELS
from .db import check_db_connection
from .forms import FormResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageEntry:
    path: str
    label: str
    icon: str
    manager_only: bool = False


PAGES = [
    PageEntry("app.py", "Home", "🏠"),
    PageEntry("pages/1_📊_Dashboard.py", "Dashboard", "📊"),
    PageEntry("pages/2_👥_Employees.py", "Employees", "👥", manager_only=True),
    PageEntry("pages/3_📈_Performance.py", "Performance", "📈"),
    PageEntry("pages/4_🎯_KPI_Targets.py", "KPI Targets", "🎯"),
    PageEntry("pages/5_🗂️_Accounts.py", "Accounts", "🗂️", manager_only=True),
    PageEntry("pages/6_📝_Tutorials.py", "Tutorials", "📝"),
    PageEntry("pages/7_📄_SOPs.py", "SOPs", "📄"),
    PageEntry("pages/8_🔧_Tools.py", "Tools", "🔧"),
    PageEntry("pages/9_📦_Products.py", "Products", "📦"),
    PageEntry("pages/10_🗓️_Daily_Report.py", "Daily Report", "🗓️"),
    PageEntry("pages/11_🔍_Report_Review.py", "Report Review", "🔍", manager_only=True),
    PageEntry("pages/12_🙍_Profile.py", "Profile", "🙍"),
]


def visible_pages(session: Optional[SessionContext]) -> List[PageEntry]:
    """Navigation entries for this session"""
    is_manager = bool(session and session.is_manager)
    return [p for p in PAGES if is_manager or not p.manager_only]


# =============================================================================
# PAGE SETUP
# =============================================================================

def setup_page(title: str, icon: str, requires_manager: bool = False) -> SessionContext:
    """
    Common header for every protected page.

    Returns:
        SessionContext of the signed-in user
    """
    st.set_page_config(
        page_title=f"{title} - Performance Monitor",
        page_icon=icon,
        layout="wide",
        initial_sidebar_state="expanded"
    )

    auth = AuthManager()
    session = guard_page(auth, requires_manager=requires_manager)

    db_connected, db_error = check_db_connection()
    if not db_connected:
        st.error(f"❌ Database connection failed: {db_error}")
        st.info("Please check your network connection or database settings")
        st.stop()

    render_sidebar(auth, session)
    return session


def render_sidebar(auth: AuthManager, session: SessionContext):
    with st.sidebar:
        st.markdown(f"### 👤 {session.display_name}")
        if session.profile_loaded:
            st.caption(
                f"{ROLE_LABELS.get(session.role, session.role)}"
                f" · {DIVISION_LABELS.get(session.division, 'No division')}"
            )
        else:
            st.caption("Profile unavailable")

        st.markdown("---")
        for page in visible_pages(session):
            st.page_link(page.path, label=page.label, icon=page.icon)
        st.markdown("---")

        if st.button("🔄 Refresh data", use_container_width=True):
            st.cache_data.clear()
            st.rerun()

        if st.button("🚪 Logout", use_container_width=True):
            auth.logout()
            st.switch_page("app.py")


# =============================================================================
# LIST STATES
# =============================================================================

EMPTY = 'empty'
ERROR = 'error'
OK = 'ok'


@dataclass
class ListState:
    status: str
    rows: Any = None
    error: Optional[str] = None

    @property
    def has_rows(self) -> bool:
        return self.status == OK


def _is_empty(rows: Any) -> bool:
    if rows is None:
        return True
    if isinstance(rows, pd.DataFrame):
        return rows.empty
    return len(rows) == 0


def resolve_list_state(loader: Callable[[], Any]) -> ListState:
    """
    Run a list loader and classify the outcome.

    A failed fetch never carries rows, so no partial list is rendered.
    """
    try:
        rows = loader()
    except Exception as e:
        logger.error(f"List fetch failed: {e}")
        return ListState(ERROR, None, str(e))

    if _is_empty(rows):
        return ListState(EMPTY, rows)
    return ListState(OK, rows)


def show_list(
    loader: Callable[[], Any],
    render: Callable[[Any], None],
    empty_message: str = "No records yet",
) -> ListState:
    """Render a list view through its loading / empty / error states"""
    with st.spinner("Loading..."):
        state = resolve_list_state(loader)

    if state.status == ERROR:
        st.error(f"❌ Could not load data: {state.error}")
    elif state.status == EMPTY:
        st.info(f"📭 {empty_message}")
    else:
        render(state.rows)
    return state


# =============================================================================
# FORM FEEDBACK
# =============================================================================

def show_form_result(result: FormResult, labels: Optional[dict] = None) -> bool:
    """Show validation errors or the mutation outcome; True on success"""
    labels = labels or {}
    if result.errors:
        for field_name, message in result.errors.items():
            st.error(f"❌ {labels.get(field_name, field_name.replace('_', ' ').title())}: {message}")
        return False

    if result.success:
        st.success(f"✅ {result.message}")
        return True

    st.error(f"❌ {result.message}")
    return False


__all__ = [
    'PageEntry', 'PAGES', 'visible_pages',
    'setup_page', 'render_sidebar',
    'ListState', 'resolve_list_state', 'show_list',
    'EMPTY', 'ERROR', 'OK',
    'show_form_result',
]
