"""
Study session lifecycle helpers.

Wires the session queue, the memory model and background persistence together
the way a presentation layer drives a session: start from the due cards,
answer the active card, move on without waiting for storage.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from lexirecall.errors import InvalidTarget
from lexirecall.memory import initialize_new_state, is_due
from lexirecall.memory.constants import DEFAULT_CONFIG, SchedulerConfig
from lexirecall.memory.memory_state import InteractionObservation, Item, MemoryState
from lexirecall.memory.strategies import SchedulingStrategy
from lexirecall.session.queue import (
    RequeuePolicy,
    ReviewCard,
    SessionQueue,
    record_outcome,
    start_session,
)
from lexirecall.session.sync import StateSyncer, SyncStatus
from lexirecall.store.base import StateStore


logger = logging.getLogger(__name__)


def load_due_cards(
    store: StateStore,
    items: Sequence[Item],
    now: Optional[datetime] = None,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> list[ReviewCard]:
    """
    Pair content items with their stored states and keep the due ones.

    Items without a stored state are new and therefore due. Order: most
    overdue first, new items last in their input order.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    stored = {state.item_id: state for state in store.get_all_states()}
    seen_cards: list[ReviewCard] = []
    new_cards: list[ReviewCard] = []

    for item in items:
        state = stored.get(item.item_id)
        if state is None:
            new_cards.append(ReviewCard(item, initialize_new_state(item.item_id, now, config)))
        elif state.is_new:
            new_cards.append(ReviewCard(item, state))
        elif is_due(state, now):
            seen_cards.append(ReviewCard(item, state))

    seen_cards.sort(key=lambda card: card.state.due_at)
    return seen_cards + new_cards


class StudySession:
    """
    One learner's active review session.

    Not thread-safe: a single caller drives answer().
    """

    def __init__(
        self,
        store: Optional[StateStore] = None,
        config: SchedulerConfig = DEFAULT_CONFIG,
        strategy: Optional[SchedulingStrategy] = None,
        requeue_policy: RequeuePolicy = RequeuePolicy.LOOKAHEAD,
        syncer: Optional[StateSyncer] = None
    ):
        self.config = config
        self.strategy = strategy
        self.requeue_policy = requeue_policy
        if syncer is None and store is not None:
            syncer = StateSyncer(store)
        self.syncer = syncer
        self.queue: Optional[SessionQueue] = None

    def start(self, cards: Sequence[ReviewCard]) -> SessionQueue:
        """Start a new session; an empty card list yields an EMPTY queue."""
        self.queue = start_session(cards, requeue_policy=self.requeue_policy, config=self.config)
        return self.queue

    @property
    def current(self) -> Optional[ReviewCard]:
        return self.queue.current if self.queue is not None else None

    @property
    def is_finished(self) -> bool:
        return self.queue is None or self.queue.is_finished

    @property
    def sync_status(self) -> SyncStatus:
        if self.syncer is None:
            return SyncStatus.SYNCED
        return self.syncer.status

    def answer(
        self,
        obs: InteractionObservation,
        now: Optional[datetime] = None
    ) -> MemoryState:
        """
        Record the learner's judgment for the active card and advance.

        The new state is handed to the syncer without waiting for the write.

        Raises:
            RuntimeError: start() has not been called
            InvalidTarget: The session is already finished
        """
        if now is None:
            now = datetime.now(timezone.utc)
        if self.queue is None:
            raise RuntimeError("No session started; call start() first")

        active = self.queue.current_id
        if active is None:
            raise InvalidTarget("<none>", None)

        result = record_outcome(
            self.queue,
            active,
            obs,
            now,
            config=self.config,
            strategy=self.strategy,
        )

        if self.syncer is not None:
            self.syncer.submit(result.state, result.event)

        return result.state

    def close(self, wait_for_sync: bool = True) -> None:
        if self.syncer is not None:
            self.syncer.close(wait_for_pending=wait_for_sync)
            if self.syncer.status == SyncStatus.FAILED:
                logger.warning(
                    "[SESSION] Closed with unsynced items: %s",
                    sorted(self.syncer.failures),
                )
