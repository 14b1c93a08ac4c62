# perfmon/constants.py
"""
Constants for the Affiliate Performance Monitor

Enumerations mirror the value sets enforced by the table definitions
in perfmon.schema.
"""

# =====================================================================
# ROLE & DIVISION DEFINITIONS
# =====================================================================

ROLE_MANAGER = 'manager'
ROLES = ['manager', 'karyawan', 'pkl']
DEFAULT_ROLE = 'karyawan'

DIVISIONS = ['konten_kreator', 'host_live', 'model', 'manager']

ROLE_LABELS = {
    'manager': 'Manager',
    'karyawan': 'Karyawan',
    'pkl': 'PKL (Intern)',
}

DIVISION_LABELS = {
    'konten_kreator': 'Konten Kreator',
    'host_live': 'Host Live',
    'model': 'Model',
    'manager': 'Manager',
}

# =====================================================================
# ACCOUNT ENUMERATIONS
# =====================================================================

PLATFORMS = ['tiktok', 'shopee', 'other']
ACCOUNT_TYPES = ['affiliate', 'seller']
ACCOUNT_STATUSES = ['active', 'banned', 'pelanggaran', 'not_recommended']

# Statuses counted as "needing attention" on the dashboard
ATTENTION_STATUSES = ['banned', 'pelanggaran', 'not_recommended']

PLATFORM_LABELS = {
    'tiktok': 'TikTok',
    'shopee': 'Shopee',
    'other': 'Other',
}

STATUS_ICONS = {
    'active': '🟢',
    'banned': '🔴',
    'pelanggaran': '🟠',
    'not_recommended': '🟡',
}

# =====================================================================
# KPI ENUMERATIONS
# =====================================================================

KPI_PERIODS = ['daily', 'monthly']
TARGET_FOR_TYPES = ['user', 'team', 'division']

# =====================================================================
# PERFORMANCE LOG METRICS
# =====================================================================

DAILY_REPORT_METRIC = 'daily_report'

# Metrics bucketed by date on the dashboard trend chart
TREND_METRICS = ['video_count', 'post_count', 'live_duration_hours']

# Metric bucketed by user on the dashboard comparison chart
COMPARISON_METRIC = DAILY_REPORT_METRIC

METRIC_LABELS = {
    'daily_report': 'Daily Reports',
    'video_count': 'Videos',
    'post_count': 'Posts',
    'live_duration_hours': 'Live Hours',
    'total_sales': 'Total Sales (Rp)',
}

# History length on the Daily Report page
DAILY_REPORT_HISTORY_LIMIT = 10

# =====================================================================
# PERIOD PRESETS
# =====================================================================

PERIOD_PRESETS = ['Today', 'Last 7 days', 'This month', 'Custom']

# =====================================================================
# COLOR SCHEME
# =====================================================================

COLORS = {
    "primary": "#14b8a6",              # Teal
    "secondary": "#f59e0b",            # Gold
    "neutral": "#d3d3d3",
    "target": "#d62728",
    "achievement_good": "#28a745",
    "achievement_bad": "#dc3545",
    "text_dark": "#333333",
    "text_light": "#666666",
}

CHART_HEIGHT = 320

# =====================================================================
# EXPORT SETTINGS
# =====================================================================

EXCEL_STYLES = {
    "header_fill_color": "14B8A6",
    "header_font_color": "FFFFFF",
    "number_format": '#,##0.##',
    "percent_format": '0.0"%"',
    "date_format": 'YYYY-MM-DD',
}
