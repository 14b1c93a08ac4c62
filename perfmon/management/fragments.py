# perfmon/management/fragments.py
"""
Streamlit UI pieces for the entity screens

Each create/edit form validates through perfmon.forms.submit_form, so an
invalid payload never reaches ManagementQueries. After a successful
mutation the form state is cleared and the page reruns, picking up the
invalidated list.
"""

from typing import Optional

import pandas as pd
import streamlit as st

from ..constants import (
    ROLES, DIVISIONS, PLATFORMS, ACCOUNT_TYPES, ACCOUNT_STATUSES,
    KPI_PERIODS, TARGET_FOR_TYPES, ROLE_LABELS, DIVISION_LABELS,
    PLATFORM_LABELS, STATUS_ICONS, DEFAULT_ROLE,
)
from ..dates import month_range
from ..forms import (
    AccountCreate, AccountUpdate, EmployeeCreate, KpiTargetCreate,
    submit_form, target_payload,
)
from ..layout import show_form_result
from .queries import CONTENT_TYPES, ManagementQueries


def clear_form_state(*keys: str):
    for key in keys:
        if key in st.session_state:
            del st.session_state[key]


def format_datetime(dt) -> str:
    if dt is None or (not isinstance(dt, str) and pd.isna(dt)):
        return "-"
    if isinstance(dt, str):
        return dt[:16]
    return dt.strftime("%Y-%m-%d %H:%M")


# =============================================================================
# ACCOUNTS
# =============================================================================

def account_form(queries: ManagementQueries, account: Optional[dict] = None):
    """Create form, or edit form when an account row is given"""
    editing = account is not None
    account = account or {}

    with st.form("account_form_edit" if editing else "account_form_create"):
        st.markdown("#### ✏️ Edit Account" if editing else "#### ➕ New Account")

        col1, col2 = st.columns(2)
        with col1:
            username = st.text_input("Username *", value=account.get('username', ''), placeholder="@username")
            platform = st.selectbox(
                "Platform", PLATFORMS,
                index=PLATFORMS.index(account.get('platform', 'tiktok')),
                format_func=lambda p: PLATFORM_LABELS.get(p, p),
            )
            account_type = st.selectbox(
                "Account Type", ACCOUNT_TYPES,
                index=ACCOUNT_TYPES.index(account.get('account_type', 'affiliate')),
                format_func=str.title,
            )
        with col2:
            followers = st.number_input(
                "Followers", min_value=0, step=1,
                value=int(account.get('followers') or 0),
            )
            keranjang_kuning = st.checkbox(
                "Keranjang Kuning (yellow cart)",
                value=bool(account.get('keranjang_kuning', False)),
            )
            status = None
            if editing:
                status = st.selectbox(
                    "Status", ACCOUNT_STATUSES,
                    index=ACCOUNT_STATUSES.index(account.get('status') or 'active'),
                    format_func=lambda s: f"{STATUS_ICONS.get(s, '')} {s.replace('_', ' ').title()}",
                )

        col_submit, col_cancel = st.columns(2)
        with col_submit:
            submitted = st.form_submit_button("💾 Save", type="primary", use_container_width=True)
        with col_cancel:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        clear_form_state('show_create_account', 'edit_account_id')
        st.rerun()

    if submitted:
        raw = {
            'username': username,
            'platform': platform,
            'account_type': account_type,
            'followers': followers,
            'keranjang_kuning': keranjang_kuning,
        }
        if editing:
            raw['status'] = status
            result = submit_form(
                AccountUpdate, raw,
                lambda data: queries.update_account(account['id'], data),
            )
        else:
            result = submit_form(AccountCreate, raw, queries.create_account)

        if show_form_result(result):
            clear_form_state('show_create_account', 'edit_account_id')
            st.rerun()


def accounts_table(queries: ManagementQueries, df: pd.DataFrame):
    header = st.columns([3, 2, 2, 2, 2, 1, 1])
    for col, label in zip(header, ["Username", "Platform", "Type", "Followers", "Status", "", ""]):
        col.markdown(f"**{label}**")

    for _, row in df.iterrows():
        cols = st.columns([3, 2, 2, 2, 2, 1, 1])
        cart = " 🛒" if row['keranjang_kuning'] else ""
        cols[0].write(f"{row['username']}{cart}")
        cols[1].write(PLATFORM_LABELS.get(row['platform'], row['platform']))
        cols[2].write(str(row['account_type']).title())
        cols[3].write(f"{int(row['followers'] or 0):,}")
        status = row['status'] or 'active'
        cols[4].write(f"{STATUS_ICONS.get(status, '')} {status.replace('_', ' ')}")

        if cols[5].button("✏️", key=f"edit_{row['id']}", help="Edit"):
            st.session_state.edit_account_id = row['id']
            st.rerun()
        if cols[6].button("🗑️", key=f"delete_{row['id']}", help="Delete"):
            st.session_state.delete_account_id = row['id']
            st.rerun()

        if st.session_state.get('delete_account_id') == row['id']:
            st.warning(f"Delete account **{row['username']}**? This cannot be undone.")
            c1, c2, _ = st.columns([1, 1, 4])
            if c1.button("Yes, delete", key=f"confirm_{row['id']}", type="primary"):
                success, message = queries.delete_account(row['id'])
                clear_form_state('delete_account_id')
                if success:
                    st.success(f"✅ {message}")
                    st.rerun()
                else:
                    st.error(f"❌ {message}")
            if c2.button("Cancel", key=f"cancel_{row['id']}"):
                clear_form_state('delete_account_id')
                st.rerun()


# =============================================================================
# EMPLOYEES
# =============================================================================

def employee_form(queries: ManagementQueries):
    with st.form("employee_form", clear_on_submit=False):
        st.markdown("#### ➕ New Employee")

        col1, col2 = st.columns(2)
        with col1:
            full_name = st.text_input("Full Name *")
            username = st.text_input("Username *")
            email = st.text_input("Email *")
        with col2:
            password = st.text_input("Password *", type="password", help="At least 6 characters")
            role = st.selectbox(
                "Role", ROLES, index=ROLES.index(DEFAULT_ROLE),
                format_func=lambda r: ROLE_LABELS.get(r, r),
            )
            division = st.selectbox(
                "Division", DIVISIONS, index=0,
                format_func=lambda d: DIVISION_LABELS.get(d, d),
            )

        col_submit, col_cancel = st.columns(2)
        with col_submit:
            submitted = st.form_submit_button("💾 Create", type="primary", use_container_width=True)
        with col_cancel:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        clear_form_state('show_create_employee')
        st.rerun()

    if submitted:
        result = submit_form(EmployeeCreate, {
            'full_name': full_name,
            'username': username,
            'email': email,
            'password': password,
            'role': role,
            'division': division,
        }, queries.create_employee)

        if show_form_result(result):
            clear_form_state('show_create_employee')
            st.rerun()


def employees_table(df: pd.DataFrame):
    display = pd.DataFrame({
        'Name': df['full_name'],
        'Username': df['username'],
        'Email': df['email'],
        'Role': df['role'].map(lambda r: ROLE_LABELS.get(r, r)),
        'Division': df['division'].map(lambda d: DIVISION_LABELS.get(d, '-') if d else '-'),
        'Last Login': df['last_login'].map(format_datetime),
        'Registered': df['registered_at'].map(format_datetime),
    })
    st.dataframe(display, use_container_width=True, hide_index=True)


# =============================================================================
# KPI TARGETS
# =============================================================================

def kpi_target_form(queries: ManagementQueries, employees_df: pd.DataFrame, teams_df: pd.DataFrame):
    start_date, end_date = month_range()

    # Outside the form so the id selector follows the chosen type
    target_for_type = st.radio(
        "Target for", TARGET_FOR_TYPES, horizontal=True,
        format_func=str.title, key="kpi_target_for_type",
    )

    with st.form("kpi_target_form"):
        st.markdown("#### ➕ New KPI Target")

        if target_for_type == 'user':
            options = dict(zip(employees_df['id'], employees_df['full_name'])) if not employees_df.empty else {}
        elif target_for_type == 'team':
            options = dict(zip(teams_df['id'], teams_df['name'])) if not teams_df.empty else {}
        else:
            options = DIVISION_LABELS

        target_for_id = st.selectbox(
            "Select target *", list(options.keys()),
            format_func=lambda k: options.get(k, k), index=None,
            placeholder=f"Choose a {target_for_type}...",
        )

        col1, col2 = st.columns(2)
        with col1:
            metric = st.text_input("Metric *", placeholder="e.g. video_count")
            period = st.selectbox("Period", KPI_PERIODS, index=KPI_PERIODS.index('monthly'), format_func=str.title)
        with col2:
            target_value = st.number_input("Target Value *", min_value=0.0, value=1.0, step=1.0)
            st.caption(f"📅 Active {start_date:%d %b %Y} – {end_date:%d %b %Y}")

        col_submit, col_cancel = st.columns(2)
        with col_submit:
            submitted = st.form_submit_button("💾 Create", type="primary", use_container_width=True)
        with col_cancel:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        clear_form_state('show_create_kpi')
        st.rerun()

    if submitted:
        result = submit_form(KpiTargetCreate, {
            'target': target_payload(target_for_type, target_for_id),
            'metric': metric,
            'target_value': target_value,
            'period': period,
        }, queries.create_kpi_target)

        if show_form_result(result, labels={'user_id': 'Target', 'team_id': 'Target', 'division': 'Target'}):
            clear_form_state('show_create_kpi')
            st.rerun()


def kpi_targets_table(df: pd.DataFrame):
    display = pd.DataFrame({
        'Target For': df['target_for_type'].str.title(),
        'Name': [
            DIVISION_LABELS.get(name, name) if kind == 'division' else name
            for kind, name in zip(df['target_for_type'], df['target_name'])
        ],
        'Metric': df['metric'],
        'Target': df['target_value'],
        'Period': df['period'].str.title(),
        'Start': df['start_date'].astype(str),
        'End': df['end_date'].astype(str),
    })
    st.dataframe(
        display, use_container_width=True, hide_index=True,
        column_config={'Target': st.column_config.NumberColumn(format="%.0f")},
    )


# =============================================================================
# CONTENT
# =============================================================================

def content_form(queries: ManagementQueries, kind: str):
    content = CONTENT_TYPES[kind]
    state_key = f"show_create_{kind}"

    with st.form(f"{kind}_form"):
        st.markdown(f"#### ➕ New {content.label}")
        raw = {'title': st.text_input("Title *")}

        if kind == 'tutorials':
            raw['body'] = st.text_area("Content")
            raw['youtube_url'] = st.text_input("YouTube URL", placeholder="https://youtube.com/...")
            raw['file_path'] = st.text_input("File URL", placeholder="https://...")
            raw['is_public'] = st.checkbox("Visible to everyone", value=False)
        else:
            raw['description'] = st.text_area("Description")
            url_label = {
                'sops': "Document URL *",
                'tools': "Tool URL *",
                'products': "Spreadsheet URL *",
            }[kind]
            raw[content.link_field] = st.text_input(url_label, placeholder="https://...")

        col_submit, col_cancel = st.columns(2)
        with col_submit:
            submitted = st.form_submit_button("💾 Create", type="primary", use_container_width=True)
        with col_cancel:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if cancelled:
        clear_form_state(state_key)
        st.rerun()

    if submitted:
        result = submit_form(content.schema, raw, lambda data: queries.create_content(kind, data))
        if show_form_result(result):
            clear_form_state(state_key)
            st.rerun()


def content_cards(df: pd.DataFrame, kind: str):
    content = CONTENT_TYPES[kind]
    cols = st.columns(2)

    for i, (_, row) in enumerate(df.iterrows()):
        with cols[i % 2]:
            with st.container(border=True):
                st.markdown(f"**{content.icon} {row['title']}**")
                text_value = row.get('body') if kind == 'tutorials' else row.get('description')
                if isinstance(text_value, str) and text_value:
                    st.caption(text_value[:240] + ("…" if len(text_value) > 240 else ""))

                if kind == 'tutorials':
                    if row.get('is_public'):
                        st.caption("🌐 Public")
                    if isinstance(row.get('youtube_url'), str) and row['youtube_url']:
                        st.video(row['youtube_url'])
                    if isinstance(row.get('file_path'), str) and row['file_path']:
                        st.link_button("📎 Open file", row['file_path'])
                else:
                    link = row.get(content.link_field)
                    if isinstance(link, str) and link:
                        st.link_button("🔗 Open", link)

                st.caption(f"Added {format_datetime(row.get('created_at'))}")
