# perfmon/dashboard/export.py
"""
Formatted Excel Export for the Dashboard and Performance pages

Sheets:
- Summary: filter settings and KPI counters
- Goals: target vs progress per metric
- Logs: performance log rows

Uses openpyxl for formatting.
"""

import logging
import numbers
from datetime import datetime
from io import BytesIO
from typing import Dict, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from ..constants import EXCEL_STYLES

logger = logging.getLogger(__name__)

EXCEL_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class DashboardExport:
    """
    Usage:
        exporter = DashboardExport()
        excel_bytes = exporter.create_report(summary, goals_df, logs_df, filters)
        st.download_button("Download", excel_bytes, "performance.xlsx", mime=EXCEL_MIME)
    """

    def __init__(self):
        self.wb = None
        self._init_styles()

    def _init_styles(self):
        self.header_fill = PatternFill(
            start_color=EXCEL_STYLES['header_fill_color'],
            end_color=EXCEL_STYLES['header_fill_color'],
            fill_type='solid'
        )
        self.header_font = Font(bold=True, color=EXCEL_STYLES['header_font_color'], size=11)
        self.title_font = Font(bold=True, size=16)

        thin = Side(style='thin', color='000000')
        self.cell_border = Border(left=thin, right=thin, top=thin, bottom=thin)
        self.center_align = Alignment(horizontal='center', vertical='center')

    # =========================================================================
    # MAIN EXPORT METHOD
    # =========================================================================

    def create_report(
        self,
        summary: Optional[Dict],
        goals_df: Optional[pd.DataFrame],
        logs_df: Optional[pd.DataFrame],
        filters: Dict,
    ) -> BytesIO:
        self.wb = Workbook()

        self._create_summary_sheet(summary or {}, filters)
        if goals_df is not None and not goals_df.empty:
            self._write_table(
                self.wb.create_sheet("Goals"),
                goals_df.rename(columns={
                    'metric': 'Metric', 'target': 'Target',
                    'progress': 'Progress', 'achievement': 'Achievement %',
                }),
                percent_columns={'Achievement %'},
            )
        if logs_df is not None and not logs_df.empty:
            self._write_table(self.wb.create_sheet("Logs"), logs_df)

        if 'Sheet' in self.wb.sheetnames:
            del self.wb['Sheet']

        output = BytesIO()
        self.wb.save(output)
        output.seek(0)

        logger.info("Excel report created successfully")
        return output

    # =========================================================================
    # SHEETS
    # =========================================================================

    def _create_summary_sheet(self, summary: Dict, filters: Dict):
        ws = self.wb.create_sheet("Summary", 0)
        ws['A1'] = "Performance Report"
        ws['A1'].font = self.title_font
        ws['A2'] = f"Generated: {datetime.now():%Y-%m-%d %H:%M}"

        row = 4
        for key, value in list(filters.items()) + list(summary.items()):
            ws.cell(row=row, column=1, value=str(key).replace('_', ' ').title()).font = Font(bold=True)
            cell = ws.cell(row=row, column=2, value=value if not isinstance(value, float) else round(value, 2))
            cell.alignment = Alignment(horizontal='left')
            row += 1

        ws.column_dimensions['A'].width = 24
        ws.column_dimensions['B'].width = 30

    def _write_table(self, ws, df: pd.DataFrame, percent_columns=frozenset()):
        columns = list(df.columns)
        for col_idx, name in enumerate(columns, 1):
            cell = ws.cell(row=1, column=col_idx, value=name)
            cell.fill = self.header_fill
            cell.font = self.header_font
            cell.alignment = self.center_align
            cell.border = self.cell_border

        for row_idx, record in enumerate(df.itertuples(index=False), 2):
            for col_idx, value in enumerate(record, 1):
                if isinstance(value, (dict, list)):
                    value = str(value)
                elif value is not None and not isinstance(value, str) and pd.isna(value):
                    value = None
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = self.cell_border
                if isinstance(value, numbers.Number) and not isinstance(value, bool):
                    name = columns[col_idx - 1]
                    cell.number_format = (
                        EXCEL_STYLES['percent_format'] if name in percent_columns
                        else EXCEL_STYLES['number_format']
                    )

        for col_idx, name in enumerate(columns, 1):
            ws.column_dimensions[get_column_letter(col_idx)].width = max(12, len(str(name)) + 4)
        ws.freeze_panes = 'A2'
