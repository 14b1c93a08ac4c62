# perfmon/dashboard/charts.py
"""
Altair Chart Builders for the Dashboard

- KPI summary cards (st.metric)
- Goal progress bars
- Trend chart (line per metric over dates)
- Comparison chart (bar per user)
"""

import logging
from typing import Dict

import altair as alt
import pandas as pd
import streamlit as st

from ..constants import COLORS, CHART_HEIGHT, METRIC_LABELS

logger = logging.getLogger(__name__)


def _label(metric: str) -> str:
    return METRIC_LABELS.get(metric, metric.replace('_', ' ').title())


class DashboardCharts:
    """
    All methods are static.

    Usage:
        DashboardCharts.render_summary_cards(summary)
        st.altair_chart(DashboardCharts.build_trend_chart(trend_df), use_container_width=True)
    """

    @staticmethod
    def render_summary_cards(summary: Dict):
        with st.container(border=True):
            col1, col2, col3, col4, col5 = st.columns(5)
            col1.metric("Total Followers", f"{summary['total_followers']:,}")
            col2.metric("Active Accounts", f"{summary['active_accounts']:,}")
            col3.metric(
                "Performance Score", f"{summary['performance_score']:.0f}%",
                help="Average achievement across KPI targets in range. Target: 100%",
            )
            col4.metric(
                "Issues", f"{summary['attention_accounts']:,}",
                help="Accounts banned, in violation or not recommended",
            )
            col5.metric("Reports Submitted", f"{summary['reports_submitted']:,}")

    @staticmethod
    def render_goal_progress(goals_df: pd.DataFrame):
        """Progress bar per targeted metric"""
        if goals_df.empty:
            st.info("🎯 No KPI targets for this range and scope")
            return

        for goal in goals_df.to_dict('records'):
            achievement = goal['achievement']
            st.progress(
                min(achievement / 100, 1.0),
                text=f"{_label(goal['metric'])}: {goal['progress']:,.0f} / {goal['target']:,.0f}",
            )
            if achievement >= 100:
                st.caption(f"✅ {achievement:.1f}% achieved")
            elif achievement >= 80:
                st.caption(f"🟡 {achievement:.1f}% achieved")
            else:
                st.caption(f"🔴 {achievement:.1f}% achieved")

    @staticmethod
    def build_trend_chart(trend_df: pd.DataFrame, title: str = "") -> alt.Chart:
        if trend_df.empty:
            return DashboardCharts._empty_chart("No activity in this range")

        df = trend_df.copy()
        df['date'] = pd.to_datetime(df['date'])
        df['metric_label'] = df['metric'].map(_label)

        return alt.Chart(df).mark_line(point=True).encode(
            x=alt.X('date:T', title='Date', axis=alt.Axis(format='%d %b')),
            y=alt.Y('value:Q', title='Total'),
            color=alt.Color(
                'metric_label:N', title='Metric',
                scale=alt.Scale(range=[COLORS['primary'], COLORS['secondary'], COLORS['target']]),
            ),
            tooltip=[
                alt.Tooltip('date:T', title='Date', format='%d %b %Y'),
                alt.Tooltip('metric_label:N', title='Metric'),
                alt.Tooltip('value:Q', title='Value', format=',.1f'),
            ],
        ).properties(height=CHART_HEIGHT, title=title)

    @staticmethod
    def build_comparison_chart(comparison_df: pd.DataFrame, metric: str, title: str = "") -> alt.Chart:
        if comparison_df.empty:
            return DashboardCharts._empty_chart(f"No {_label(metric).lower()} in this range")

        return alt.Chart(comparison_df).mark_bar(color=COLORS['primary']).encode(
            x=alt.X('value:Q', title=_label(metric)),
            y=alt.Y('user_name:N', title='', sort='-x'),
            tooltip=[
                alt.Tooltip('user_name:N', title='Employee'),
                alt.Tooltip('value:Q', title=_label(metric), format=',.1f'),
            ],
        ).properties(height=CHART_HEIGHT, title=title)

    @staticmethod
    def _empty_chart(message: str) -> alt.Chart:
        return alt.Chart(pd.DataFrame({'text': [message]})).mark_text(
            size=14, color=COLORS['text_light']
        ).encode(text='text:N').properties(height=CHART_HEIGHT)
