# tests/test_export.py
import pandas as pd
from openpyxl import load_workbook

from perfmon.dashboard.export import DashboardExport


def test_report_sheets():
    goals = pd.DataFrame([{'metric': 'video_count', 'target': 14.0, 'progress': 7.0, 'achievement': 50.0}])
    logs = pd.DataFrame([{'date': '2026-10-02', 'user_name': 'Ayu', 'metric': 'video_count', 'value': 7}])

    output = DashboardExport().create_report(
        {'reports_submitted': 3, 'performance_score': 50.0},
        goals, logs, {'period': '2026-10-01 to 2026-10-07'},
    )

    wb = load_workbook(output)
    assert wb.sheetnames == ['Summary', 'Goals', 'Logs']
    assert wb['Goals']['A1'].value == 'Metric'
    assert wb['Goals']['D2'].value == 50.0
    assert wb['Logs']['D2'].value == 7


def test_summary_only():
    wb = load_workbook(DashboardExport().create_report({}, None, pd.DataFrame(), {}))
    assert wb.sheetnames == ['Summary']
