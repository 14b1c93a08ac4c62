# tests/test_list_state.py
import pandas as pd

from perfmon.layout import EMPTY, ERROR, OK, resolve_list_state


def test_rows():
    state = resolve_list_state(lambda: pd.DataFrame([{'id': 1}]))
    assert state.status == OK
    assert state.has_rows


def test_empty():
    assert resolve_list_state(pd.DataFrame).status == EMPTY
    assert resolve_list_state(list).status == EMPTY


def test_failed_fetch_carries_no_rows():
    def boom():
        raise RuntimeError("connection lost")

    state = resolve_list_state(boom)
    assert state.status == ERROR
    assert state.rows is None
    assert state.error == "connection lost"
    assert not state.has_rows
