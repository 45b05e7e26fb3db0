"""
Session queue for one review session.

The queue is launch-scoped: built from the currently-due cards, mutated after
every interaction, and discarded when the session ends. Not safe for
concurrent mutation; one writer per session.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Sequence

from lexirecall.errors import InvalidTarget
from lexirecall.memory import process_review
from lexirecall.memory.constants import DEFAULT_CONFIG, SchedulerConfig
from lexirecall.memory.memory_state import InteractionObservation, Item, MemoryState
from lexirecall.memory.strategies import SchedulingStrategy


logger = logging.getLogger(__name__)


class SessionStatus(str, Enum):
    ACTIVE = "active"
    FINISHED = "finished"
    EMPTY = "empty"  # Started with no due cards; finished from the outset


class RequeuePolicy(str, Enum):
    """Where a forgotten card goes back into the pending order."""
    LOOKAHEAD = "lookahead"  # After `requeue_offset` other cards
    END = "end"              # Behind every other pending card


@dataclass
class ReviewCard:
    """An item paired with its current memory state."""
    item: Item
    state: MemoryState

    @property
    def item_id(self) -> str:
        return self.item.item_id


@dataclass
class SessionQueue:
    """
    Ordered queue of cards for one session.

    `pending` holds item ids still to be presented; its head is the active
    card. Completed ids leave `pending` for good.
    """
    cards: dict[str, ReviewCard]
    order: list[str]
    pending: list[str]
    completed: set[str] = field(default_factory=set)
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    requeue_policy: RequeuePolicy = RequeuePolicy.LOOKAHEAD
    requeue_offset: int = DEFAULT_CONFIG.requeue_offset
    status: SessionStatus = SessionStatus.ACTIVE
    presentations: int = 0

    @property
    def is_finished(self) -> bool:
        return self.status in (SessionStatus.FINISHED, SessionStatus.EMPTY)

    @property
    def is_empty(self) -> bool:
        return self.status == SessionStatus.EMPTY

    @property
    def current_id(self) -> Optional[str]:
        if self.is_finished or not self.pending:
            return None
        return self.pending[0]

    @property
    def current(self) -> Optional[ReviewCard]:
        item_id = self.current_id
        return self.cards[item_id] if item_id is not None else None

    @property
    def remaining(self) -> int:
        """Distinct cards not yet completed."""
        return len(self.order) - len(self.completed)

    @property
    def progress(self) -> float:
        if not self.order:
            return 1.0
        return len(self.completed) / len(self.order)

    def state_of(self, item_id: str) -> MemoryState:
        return self.cards[item_id].state

    def _requeue_head(self) -> None:
        item_id = self.pending.pop(0)
        if self.requeue_policy == RequeuePolicy.END:
            index = len(self.pending)
        else:
            index = min(self.requeue_offset, len(self.pending))
        self.pending.insert(index, item_id)


@dataclass(frozen=True)
class OutcomeResult:
    """Result of record_outcome(): the (mutated) queue and the item's new state."""
    queue: SessionQueue
    state: MemoryState
    event: Optional[dict] = None

    @property
    def finished(self) -> bool:
        return self.queue.is_finished


def start_session(
    cards: Sequence[ReviewCard],
    requeue_policy: RequeuePolicy = RequeuePolicy.LOOKAHEAD,
    config: SchedulerConfig = DEFAULT_CONFIG
) -> SessionQueue:
    """
    Start a new review session from the due cards, keeping their order.

    An empty input is not an error: the returned queue has status EMPTY.
    Duplicate item ids keep their first occurrence.
    """
    card_map: dict[str, ReviewCard] = {}
    order: list[str] = []
    for card in cards:
        if card.item_id in card_map:
            continue
        card_map[card.item_id] = card
        order.append(card.item_id)

    queue = SessionQueue(
        cards=card_map,
        order=order,
        pending=list(order),
        requeue_policy=requeue_policy,
        requeue_offset=config.requeue_offset,
        status=SessionStatus.ACTIVE if order else SessionStatus.EMPTY,
    )

    if queue.is_empty:
        logger.info("[SESSION] %s started with no due cards", queue.session_id)
    else:
        logger.info("[SESSION] %s started with %d cards", queue.session_id, len(order))
    return queue


def record_outcome(
    queue: SessionQueue,
    item_id: str,
    obs: InteractionObservation,
    now: datetime,
    config: SchedulerConfig = DEFAULT_CONFIG,
    strategy: Optional[SchedulingStrategy] = None
) -> OutcomeResult:
    """
    Apply an interaction with the active card and advance the session.

    - remembered: the card is completed; the next pending card becomes active
    - forgot: the card is re-inserted later so it is seen again this session

    Raises:
        InvalidTarget: item_id is not the active card, or the session is finished
        InvalidObservation: The observation violates its contract
    """
    active_id = queue.current_id
    if active_id is None or item_id != active_id:
        raise InvalidTarget(item_id, active_id)

    card = queue.cards[item_id]
    new_state, event = process_review(card.state, obs, now, config=config, strategy=strategy)
    event["session_id"] = queue.session_id
    event["session_position"] = queue.presentations
    card.state = new_state
    queue.presentations += 1

    if obs.remembered:
        queue.pending.pop(0)
        queue.completed.add(item_id)
        if not queue.pending:
            queue.status = SessionStatus.FINISHED
            logger.info(
                "[SESSION] %s finished after %d presentations",
                queue.session_id,
                queue.presentations,
            )
    else:
        queue._requeue_head()
        logger.debug("[SESSION] %s requeued %s", queue.session_id, item_id)

    return OutcomeResult(queue=queue, state=new_state, event=event)
