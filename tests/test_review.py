# tests/test_review.py
import json

import pandas as pd

from perfmon.reports.review import UNKNOWN_USER, build_review_rows, format_key


def report_row(**overrides):
    row = {
        'id': 'r-1', 'date': '2026-10-02', 'user_id': 'u-1', 'user_name': 'Ayu Lestari',
        'division': 'konten_kreator',
        'meta': json.dumps({'video_count': 3, 'post_count': 1, 'notes': 'Two drafts pending'}),
    }
    row.update(overrides)
    return row


def test_payload_and_notes_are_split():
    [row] = build_review_rows(pd.DataFrame([report_row()]))
    assert row.valid
    assert row.details == {'video_count': 3, 'post_count': 1}
    assert row.notes == 'Two drafts pending'
    assert row.user_name == 'Ayu Lestari'


def test_missing_author_falls_back():
    [row] = build_review_rows(pd.DataFrame([report_row(user_name=None)]))
    assert row.user_name == UNKNOWN_USER


def test_unreadable_payload_is_kept():
    [row] = build_review_rows(pd.DataFrame([
        report_row(division='model', meta=json.dumps({'foo': 'bar', 'notes': 'n/a'})),
    ]))
    assert not row.valid
    assert row.details == {'foo': 'bar'}
    assert row.notes == 'n/a'


def test_missing_division():
    [row] = build_review_rows(pd.DataFrame([report_row(division=None)]))
    assert row.division is None
    assert not row.valid


def test_empty():
    assert build_review_rows(pd.DataFrame()) == []


def test_format_key():
    assert format_key('live_duration_hours') == 'Live Duration Hours'
