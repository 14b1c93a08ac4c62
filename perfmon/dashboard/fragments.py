# perfmon/dashboard/fragments.py
"""
Streamlit Fragments for the Dashboard

The comparison section reruns on its own when its metric changes.
"""

import pandas as pd
import streamlit as st

from ..constants import COMPARISON_METRIC, METRIC_LABELS
from .charts import DashboardCharts
from .metrics import DashboardMetrics


@st.fragment
def comparison_fragment(metrics: DashboardMetrics, fragment_key: str = "comparison"):
    st.subheader("👥 Comparison by Employee")

    options = metrics.available_metrics() or [COMPARISON_METRIC]
    if COMPARISON_METRIC not in options:
        options = [COMPARISON_METRIC] + options

    metric = st.selectbox(
        "Metric", options, index=options.index(COMPARISON_METRIC),
        format_func=lambda m: METRIC_LABELS.get(m, m), key=f"{fragment_key}_metric",
    )
    comparison_df = metrics.prepare_comparison_series(metric)
    st.altair_chart(
        DashboardCharts.build_comparison_chart(comparison_df, metric),
        use_container_width=True,
    )


def trend_section(metrics: DashboardMetrics):
    st.subheader("📈 Activity Trend")
    st.altair_chart(
        DashboardCharts.build_trend_chart(metrics.prepare_trend_series()),
        use_container_width=True,
    )


def recent_activity(logs_df: pd.DataFrame, limit: int = 5):
    st.subheader("🕒 Recent Activity")
    if logs_df.empty:
        st.caption("No recent activity to display")
        return

    for record in logs_df.head(limit).to_dict('records'):
        name = record.get('user_name') if isinstance(record.get('user_name'), str) else 'Unknown User'
        metric = METRIC_LABELS.get(record['metric'], record['metric'])
        st.markdown(f"**{name}** · {metric} · {record['date']}")
