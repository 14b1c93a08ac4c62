# tests/test_charts.py
from datetime import date

import altair as alt
import pandas as pd

from perfmon.dashboard.charts import DashboardCharts


def test_trend_chart_labels_metrics():
    trend = pd.DataFrame([
        {'date': date(2026, 10, 1), 'metric': 'video_count', 'value': 3.0},
        {'date': date(2026, 10, 2), 'metric': 'post_count', 'value': 1.0},
    ])
    chart = DashboardCharts.build_trend_chart(trend)
    assert isinstance(chart, alt.Chart)
    assert set(chart.data['metric_label']) == {'Videos', 'Posts'}


def test_empty_series_render_placeholder():
    chart = DashboardCharts.build_comparison_chart(pd.DataFrame(), 'daily_report')
    assert chart.data['text'].tolist() == ['No daily reports in this range']
