"""
Watch loop: block until a board changes or a deadline passes.

Each cycle sleeps for the poll interval, captures a fresh snapshot and
compares it with the previous one. Cycles run strictly one after another;
a cycle's API calls (one lists fetch, one activity fetch, one cards fetch
per targeted list) are each gated by the client's rate limiter.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from trellomcp.watch.changes import ChangeDetector, ChangeRecord
from trellomcp.watch.snapshot import BoardSnapshot, BoardSource, SnapshotBuilder, SnapshotStore

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_MS = 5000
DEFAULT_TIMEOUT_MS = 300000


class WatchResult(BaseModel):
    """
    Outcome of a watch: changes found, or timed out with no changes.

    Serializes as {"changes": [...], "timedOut": bool}.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    changes: list[ChangeRecord]
    timed_out: bool

    @classmethod
    def found(cls, changes: list[ChangeRecord]) -> WatchResult:
        if not changes:
            raise ValueError("A found result needs at least one change")
        return cls(changes=changes, timed_out=False)

    @classmethod
    def timeout(cls) -> WatchResult:
        return cls(changes=[], timed_out=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class WatchLoop:
    """
    Polls a board until the ChangeDetector reports something.

    Example:
        loop = WatchLoop(client, store)
        result = await loop.watch("board-1", poll_interval_ms=2000, timeout_ms=60000)
        if not result.timed_out:
            for change in result.changes:
                print(change.type, change.card_name)

    Args:
        source: Upstream reads (lists, cards, activity)
        store: Latest snapshot per board, shared across watches
        sleep: Suspension used between cycles
        clock: Monotonic time source for the deadline
    """

    def __init__(
        self,
        source: BoardSource,
        store: SnapshotStore,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._source = source
        self._store = store
        self._builder = SnapshotBuilder(source)
        self._detector = ChangeDetector(source)
        self._sleep = sleep
        self._clock = clock

    async def watch(
        self,
        board_id: str,
        list_ids: Iterable[str] | None = None,
        *,
        poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
    ) -> WatchResult:
        """
        Wait for the first change on a board.

        Args:
            board_id: Board to watch
            list_ids: Restrict card tracking to these lists (None = all)
            poll_interval_ms: Pause between cycles
            timeout_ms: Overall deadline

        Returns:
            WatchResult with changes, or timed_out=True

        Raises:
            IntegrationError: Any upstream failure ends the watch immediately
        """
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if timeout_ms < 0:
            raise ValueError("timeout_ms must not be negative")

        targets = list(list_ids) if list_ids is not None else None
        started = self._clock()
        interval = poll_interval_ms / 1000
        deadline = timeout_ms / 1000

        previous = await self._builder.capture(board_id, targets)
        await self._resume_activity_cursor(previous)
        self._store.put(previous)
        list_names = dict(previous.list_names)

        logger.info(
            f"[watch] Watching board {board_id} "
            f"(interval={poll_interval_ms}ms, timeout={timeout_ms}ms)"
        )

        cycles = 0
        while self._clock() - started < deadline:
            await self._sleep(interval)
            current = await self._builder.capture(board_id, targets)
            changes = await self._detector.detect(previous, current, list_names)
            self._store.put(current)
            cycles += 1

            if changes:
                return WatchResult.found(changes)
            previous = current

        logger.info(f"[watch] Board {board_id}: no changes after {cycles} cycle(s)")
        return WatchResult.timeout()

    async def _resume_activity_cursor(self, snapshot: BoardSnapshot) -> None:
        """
        Set where the first comment scan starts.

        Continues from the last watch of this board when there was one;
        otherwise starts at the newest existing activity so older comments
        are not reported as new.
        """
        stored = self._store.get(snapshot.board_id)
        if stored is not None and stored.last_activity_id is not None:
            snapshot.last_activity_id = stored.last_activity_id
            return

        latest = await self._source.get_recent_activity(snapshot.board_id, limit=1)
        snapshot.last_activity_id = latest[0].id if latest else None
