# perfmon/reports/review.py
"""
Report review rows

One row per submitted daily report. The stored payload is decoded
through the DailyReport variant of its division; notes are split out.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pandas as pd

from ..db import from_json
from ..forms import parse_report_meta

UNKNOWN_USER = "Unknown User"


@dataclass
class ReviewRow:
    id: str
    date: Any
    user_id: Optional[str]
    user_name: str
    division: Optional[str]
    details: Dict[str, Any] = field(default_factory=dict)
    notes: Optional[str] = None
    valid: bool = True


def format_key(key: str) -> str:
    return key.replace('_', ' ').title()


def build_review_row(row: Dict[str, Any]) -> ReviewRow:
    meta = from_json(row.get('meta'))
    division = row.get('division')
    if not isinstance(division, str) or not division:
        division = None
    report = parse_report_meta(division, meta)

    if report is not None:
        payload = report.to_meta()
        valid = True
    else:
        # Keep what was stored so a manager can still read it
        payload = dict(meta)
        valid = False

    notes = payload.pop('notes', None)
    name = row.get('user_name')
    if not isinstance(name, str) or not name:
        name = UNKNOWN_USER

    return ReviewRow(
        id=row['id'],
        date=row.get('date'),
        user_id=row.get('user_id'),
        user_name=name,
        division=division,
        details=payload,
        notes=notes,
        valid=valid,
    )


def build_review_rows(df: pd.DataFrame) -> List[ReviewRow]:
    if df is None or df.empty:
        return []
    return [build_review_row(record) for record in df.to_dict('records')]
