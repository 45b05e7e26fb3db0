"""
Background persistence of updated memory states.

The session applies every new state optimistically and moves on; the write to
the state store happens on a worker thread. Failures are retried with
exponential backoff and then reported through `status`, never raised back into
the session.
"""

from __future__ import annotations

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from enum import Enum
from typing import Optional

from lexirecall.errors import PersistenceError
from lexirecall.memory.memory_state import MemoryState
from lexirecall.store.base import StateStore


logger = logging.getLogger(__name__)


class SyncStatus(str, Enum):
    SYNCED = "synced"
    PENDING = "pending"    # Writes in flight
    FAILED = "failed"      # At least one state is not yet synced


class StateSyncer:
    """
    Fire-and-forget writer in front of a StateStore.

    Writes run one at a time on a single worker thread, so states for the same
    item land in submission order.
    """

    def __init__(
        self,
        store: StateStore,
        max_retries: int = 3,
        backoff_seconds: float = 0.5,
        sleep=time.sleep
    ):
        self.store = store
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="lexirecall-sync")
        self._lock = threading.Lock()
        self._pending: dict[str, int] = {}
        self._futures: set[Future] = set()
        # item_id -> sequence number of the newest submitted state
        self._latest: dict[str, int] = {}
        # item_id -> (sequence number, unsynced state, its event, last error)
        self._failed: dict[str, tuple[int, MemoryState, Optional[dict], PersistenceError]] = {}

    # ---- status ----

    @property
    def status(self) -> SyncStatus:
        with self._lock:
            if self._failed:
                return SyncStatus.FAILED
            if self._pending:
                return SyncStatus.PENDING
            return SyncStatus.SYNCED

    @property
    def pending_ids(self) -> set[str]:
        with self._lock:
            return set(self._pending)

    @property
    def failures(self) -> dict[str, PersistenceError]:
        with self._lock:
            return {item_id: error for item_id, (_, _, _, error) in self._failed.items()}

    # ---- writes ----

    def submit(self, state: MemoryState, event: Optional[dict] = None) -> Future:
        """
        Queue a state (and optional review event) for persistence.

        Returns immediately; the returned future resolves to True when the
        write succeeded and False when it was given up after retries.

        Raises:
            RuntimeError: The syncer has been closed
        """
        with self._lock:
            seq = self._latest.get(state.item_id, 0) + 1
            self._latest[state.item_id] = seq
        return self._enqueue(seq, state, event)

    def retry_failed(self) -> list[Future]:
        """
        Resubmit the unsynced state of every failed item.

        A retried state keeps its original place in the item's history, so it
        never overwrites a newer state submitted in the meantime; only its
        review event is written in that case.
        """
        with self._lock:
            failed = list(self._failed.values())
            self._failed.clear()
        return [self._enqueue(seq, state, event) for seq, state, event, _ in failed]

    def flush(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for in-flight writes.

        Returns:
            True when every submitted write has finished within the timeout
        """
        with self._lock:
            futures = set(self._futures)
        if not futures:
            return True
        _, not_done = wait(futures, timeout=timeout)
        return not not_done

    def close(self, wait_for_pending: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_pending)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    # ---- worker ----

    def _enqueue(self, seq: int, state: MemoryState, event: Optional[dict]) -> Future:
        with self._lock:
            self._pending[state.item_id] = self._pending.get(state.item_id, 0) + 1
        try:
            future = self._executor.submit(self._write, seq, state, event)
        except RuntimeError:
            self._release(state.item_id)
            raise
        with self._lock:
            self._futures.add(future)
        future.add_done_callback(self._forget_future)
        return future

    def _release(self, item_id: str) -> None:
        with self._lock:
            remaining = self._pending.get(item_id, 0) - 1
            if remaining > 0:
                self._pending[item_id] = remaining
            else:
                self._pending.pop(item_id, None)

    def _forget_future(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    def _is_superseded(self, seq: int, item_id: str) -> bool:
        with self._lock:
            return seq < self._latest.get(item_id, seq)

    def _write(self, seq: int, state: MemoryState, event: Optional[dict]) -> bool:
        attempt = 0
        try:
            while True:
                try:
                    if self._is_superseded(seq, state.item_id):
                        logger.debug("[SYNC] Skipping stale state for %s", state.item_id)
                    else:
                        self.store.upsert_state(state)
                    if event is not None:
                        self.store.log_review_event(event)
                except PersistenceError as exc:
                    error = exc
                except Exception as exc:
                    error = PersistenceError(str(exc), item_id=state.item_id)
                else:
                    with self._lock:
                        failed = self._failed.get(state.item_id)
                        if failed is not None and failed[0] <= seq:
                            del self._failed[state.item_id]
                    return True

                attempt += 1
                if attempt > self.max_retries:
                    logger.error(
                        "[SYNC] Giving up on %s after %d attempts: %s",
                        state.item_id,
                        attempt,
                        error,
                    )
                    with self._lock:
                        failed = self._failed.get(state.item_id)
                        if failed is None or failed[0] <= seq:
                            self._failed[state.item_id] = (seq, state, event, error)
                    return False

                delay = self.backoff_seconds * (2 ** (attempt - 1))
                logger.warning(
                    "[SYNC] Write for %s failed (attempt %d), retrying in %.2fs: %s",
                    state.item_id,
                    attempt,
                    delay,
                    error,
                )
                self._sleep(delay)
        finally:
            self._release(state.item_id)
