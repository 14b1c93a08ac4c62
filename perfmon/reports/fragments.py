# perfmon/reports/fragments.py
"""Streamlit UI for daily reports, report review and performance logs"""

from typing import List

import pandas as pd
import streamlit as st

from ..auth import SessionContext
from ..constants import DIVISION_LABELS, METRIC_LABELS
from ..dates import as_date, today
from ..forms import DAILY_REPORT_ADAPTER, PerformanceLogCreate, submit_form
from ..layout import show_form_result
from .queries import ReportQueries
from .review import ReviewRow, format_key


# =============================================================================
# DAILY REPORT
# =============================================================================

def daily_report_form(queries: ReportQueries, session: SessionContext):
    """Division-specific report form for today"""
    division = session.division

    with st.form("daily_report_form", clear_on_submit=True):
        st.markdown(f"#### 📝 Today's Report · {today():%A, %d %B %Y}")
        st.caption(f"Division: {DIVISION_LABELS.get(division, division)}")

        raw = {'division': division}
        if division == 'konten_kreator':
            col1, col2 = st.columns(2)
            raw['video_count'] = col1.number_input("Videos uploaded", min_value=0, step=1, value=0)
            raw['post_count'] = col2.number_input("Posts published", min_value=0, step=1, value=0)
        elif division == 'host_live':
            col1, col2 = st.columns(2)
            raw['live_duration_hours'] = col1.number_input(
                "Live duration (hours)", min_value=0.0, step=0.1, value=0.0
            )
            raw['total_sales'] = col2.number_input("Total sales (Rp)", min_value=0.0, step=1000.0, value=0.0)
        elif division == 'model':
            raw['project_name'] = st.text_input("Project / endorsement name", placeholder="e.g. Photoshoot Brand A")
        else:
            st.caption("Your division has no specific fields.")

        raw['notes'] = st.text_area("Notes (optional)")
        submitted = st.form_submit_button("📨 Submit Report", type="primary", use_container_width=True)

    if submitted:
        result = submit_form(DAILY_REPORT_ADAPTER, raw, queries.submit_daily_report)
        show_form_result(result)


def daily_report_history(df: pd.DataFrame):
    for record in df.to_dict('records'):
        submitted_at = record.get('created_at')
        time_text = pd.to_datetime(submitted_at).strftime('%H:%M') if submitted_at is not None else '-'
        st.markdown(f"**{as_date(record['date']):%A, %d %b %Y}**")
        st.caption(f"Submitted at {time_text}")
        st.divider()


# =============================================================================
# REPORT REVIEW
# =============================================================================

def review_table(rows: List[ReviewRow]):
    for row in rows:
        division = DIVISION_LABELS.get(row.division, 'N/A') if row.division else 'N/A'
        title = f"{row.user_name} · {as_date(row.date):%d %B %Y} · {division}"
        with st.expander(title):
            if not row.valid:
                st.warning("⚠️ This report does not match its division's format; showing stored values.")

            if row.details:
                cols = st.columns(min(len(row.details), 4))
                for i, (key, value) in enumerate(row.details.items()):
                    label = METRIC_LABELS.get(key, format_key(key))
                    if isinstance(value, (int, float)) and not isinstance(value, bool):
                        cols[i % len(cols)].metric(label, f"{value:,.2f}".rstrip('0').rstrip('.'))
                    else:
                        cols[i % len(cols)].markdown(f"**{label}**  \n{value}")
            else:
                st.caption("No details filled in.")

            if row.notes:
                st.markdown("**Notes**")
                st.info(row.notes)


# =============================================================================
# PERFORMANCE LOGS
# =============================================================================

def performance_log_form(queries: ReportQueries, employees_df: pd.DataFrame):
    options = dict(zip(employees_df['id'], employees_df['full_name'])) if not employees_df.empty else {}

    with st.form("performance_log_form", clear_on_submit=True):
        st.markdown("#### ➕ Record Metric")
        col1, col2 = st.columns(2)
        with col1:
            log_date = st.date_input("Date", value=today())
            user_id = st.selectbox(
                "Employee *", list(options.keys()), index=None,
                format_func=lambda k: options.get(k, k), placeholder="Choose an employee...",
            )
        with col2:
            metric = st.text_input("Metric *", placeholder="e.g. video_count")
            value = st.number_input("Value *", min_value=0.0, step=1.0, value=0.0)
        notes = st.text_input("Notes")
        submitted = st.form_submit_button("💾 Save", type="primary")

    if submitted:
        result = submit_form(PerformanceLogCreate, {
            'date': log_date,
            'user_id': user_id or '',
            'metric': metric,
            'value': value,
            'notes': notes,
        }, queries.record_performance_log)
        if show_form_result(result, labels={'user_id': 'Employee'}):
            st.rerun()


def performance_log_table(df: pd.DataFrame, show_user: bool = True):
    display = pd.DataFrame({
        'Date': df['date'].map(lambda d: as_date(d).isoformat()),
        'Employee': df['user_name'].fillna('Unknown User'),
        'Division': df['division'].map(lambda d: DIVISION_LABELS.get(d, '-') if isinstance(d, str) else '-'),
        'Metric': df['metric'].map(lambda m: METRIC_LABELS.get(m, m)),
        'Value': df['value'],
    })
    if not show_user:
        display = display.drop(columns=['Employee'])
    st.dataframe(display, use_container_width=True, hide_index=True)
