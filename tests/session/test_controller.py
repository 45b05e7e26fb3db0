import logging
from dataclasses import replace
from datetime import timedelta

import pytest

from lexirecall.errors import InvalidTarget
from lexirecall.memory import Item, evaluate, initialize_new_state
from lexirecall.session import StateSyncer, StudySession, SyncStatus, load_due_cards
from tests.fakes import FakeStateStore, forgot, make_card, remembered


def _seen(item_id, now, due_in):
    seen_at = now - timedelta(days=3)
    state = evaluate(initialize_new_state(item_id, seen_at), remembered(), seen_at)
    return replace(state, due_at=now + due_in)


def test_load_due_cards_orders_overdue_first_then_new(now):
    store = FakeStateStore()
    store.states["w:b"] = _seen("w:b", now, timedelta(hours=-1))
    store.states["w:c"] = _seen("w:c", now, timedelta(hours=5))
    store.states["w:d"] = _seen("w:d", now, timedelta(hours=-6))
    items = [Item("w:a", "a"), Item("w:b", "b"), Item("w:c", "c"), Item("w:d", "d")]

    cards = load_due_cards(store, items, now)

    assert [card.item_id for card in cards] == ["w:d", "w:b", "w:a"]
    assert cards[-1].state.is_new


def test_session_persists_each_answer(now):
    store = FakeStateStore()
    session = StudySession(store=store)
    queue = session.start([make_card("w:a"), make_card("w:b")])

    session.answer(forgot(), now)
    session.answer(remembered(), now)
    session.answer(remembered(), now)
    session.close()

    assert session.is_finished
    assert session.sync_status == SyncStatus.SYNCED
    assert set(store.states) == {"w:a", "w:b"}
    assert [e["item_id"] for e in store.events] == ["w:a", "w:b", "w:a"]
    assert {e["session_id"] for e in store.events} == {queue.session_id}


def test_session_without_store_runs_in_memory(now):
    session = StudySession()
    session.start([make_card("w:a")])
    state = session.answer(remembered(), now)

    assert state.total_exposure == 1
    assert session.is_finished
    assert session.sync_status == SyncStatus.SYNCED


def test_answer_requires_started_session(now):
    with pytest.raises(RuntimeError):
        StudySession().answer(remembered(), now)


def test_answer_after_finish_is_rejected(now):
    session = StudySession()
    session.start([make_card("w:a")])
    session.answer(remembered(), now)
    with pytest.raises(InvalidTarget):
        session.answer(remembered(), now)


def test_empty_session(now):
    session = StudySession()
    queue = session.start([])
    assert queue.is_empty
    assert session.is_finished
    assert session.current is None


def test_storage_failure_does_not_block_the_session(now, caplog):
    store = FakeStateStore(failures=100)
    syncer = StateSyncer(store, max_retries=1, sleep=lambda s: None)
    session = StudySession(syncer=syncer)
    session.start([make_card("w:a"), make_card("w:b")])

    session.answer(remembered(), now)
    assert session.current.item_id == "w:b"
    session.answer(remembered(), now)

    with caplog.at_level(logging.WARNING):
        session.close()

    assert session.is_finished
    assert session.sync_status == SyncStatus.FAILED
    assert store.states == {}
    assert "unsynced" in caplog.text


def test_load_due_cards_reads_states_in_one_call(now):
    class CountingStore(FakeStateStore):
        calls = 0

        def get_all_states(self):
            self.calls += 1
            return super().get_all_states()

        def get_state(self, item_id):
            raise AssertionError("per-item lookup")

    store = CountingStore()
    store.states["w:b"] = _seen("w:b", now, timedelta(hours=-1))
    items = [Item(f"w:{name}", name) for name in "abcdef"]

    cards = load_due_cards(store, items, now)

    assert store.calls == 1
    assert [card.item_id for card in cards] == ["w:b", "w:a", "w:c", "w:d", "w:e", "w:f"]
