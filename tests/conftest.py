"""Shared fixtures: a fixed clock, a sample state and a SQLite-backed store."""

from __future__ import annotations

from datetime import timedelta

import pytest

from lexirecall.memory import MemoryState
from lexirecall.store import SqlStateStore
from tests.fakes import NOW


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def seen_state():
    """alpha=3, beta=1, halflife=1 day, last seen a day ago."""
    return MemoryState(
        item_id="w:converge",
        success_weight=3.0,
        failure_weight=1.0,
        halflife=1440.0,
        last_seen=NOW - timedelta(days=1),
        total_exposure=4,
        due_at=NOW - timedelta(hours=2),
    )


@pytest.fixture
def sql_store(tmp_path):
    store = SqlStateStore(f"sqlite:///{tmp_path / 'lexirecall.db'}")
    store.init_db()
    yield store
    store.dispose()
