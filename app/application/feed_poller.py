import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from time import monotonic
from typing import Protocol

from app.domain.enums import FeedTab
from app.domain.feed import (
    ConversationFeed,
    ConversationViewModel,
    CountsSummary,
    refine_feed,
    tab_counts,
)
from app.infra.http.feed_client import FeedQuery
from app.services.errors import FeedUnavailableError

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL_SECONDS = 10.0
DEFAULT_STALE_SECONDS = 5.0


class FeedSource(Protocol):
    async def fetch_feed(self, query: FeedQuery | None = None) -> ConversationFeed: ...


@dataclass(frozen=True, slots=True)
class FeedSnapshot:
    feed: ConversationFeed
    fetched_at: datetime
    fetched_monotonic: float


@dataclass(frozen=True, slots=True)
class FeedState:
    snapshot: FeedSnapshot | None
    error: FeedUnavailableError | None
    is_refetching: bool

    @property
    def is_loading(self) -> bool:
        return self.snapshot is None and self.error is None

    @property
    def conversations(self) -> list[ConversationViewModel]:
        if self.snapshot is None:
            return []
        return list(self.snapshot.feed.items)

    @property
    def counts(self) -> CountsSummary:
        if self.snapshot is None:
            return CountsSummary()
        return self.snapshot.feed.counts


UpdateCallback = Callable[[FeedState], Awaitable[None]]


class ConversationFeedPoller:
    """Stale-while-revalidate cache for one feed query.

    Every request is numbered. Once a request has resolved, successfully
    or not, the outcome of any older request is discarded, and a success
    swaps items and counts in a single snapshot. Failures keep the last
    good snapshot visible. Concurrent ``get`` callers share one request.
    """

    def __init__(
        self,
        source: FeedSource,
        query: FeedQuery | None = None,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        stale_seconds: float = DEFAULT_STALE_SECONDS,
        on_update: UpdateCallback | None = None,
        clock: Callable[[], float] = monotonic,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("Poll interval must be positive.")
        self.source = source
        self.query = query or FeedQuery()
        self.interval_seconds = interval_seconds
        self.stale_seconds = stale_seconds
        self.on_update = on_update
        self._clock = clock

        self._snapshot: FeedSnapshot | None = None
        self._error: FeedUnavailableError | None = None
        self._issued_seq = 0
        self._resolved_seq = 0
        self._in_flight = 0
        self._pending: asyncio.Task[FeedState] | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> FeedState:
        return FeedState(
            snapshot=self._snapshot,
            error=self._error,
            is_refetching=self._in_flight > 0,
        )

    def is_stale(self) -> bool:
        if self._snapshot is None:
            return True
        return self._clock() - self._snapshot.fetched_monotonic >= self.stale_seconds

    async def get(self) -> FeedState:
        if not self.is_stale():
            return self.state
        if self._pending is None or self._pending.done():
            self._pending = asyncio.create_task(self.refresh())
            self._pending.add_done_callback(self._clear_pending)
        # Shielded so one cancelled caller does not cancel the shared request.
        return await asyncio.shield(self._pending)

    def _clear_pending(self, task: asyncio.Task[FeedState]) -> None:
        if self._pending is task:
            self._pending = None

    async def refresh(self) -> FeedState:
        self._issued_seq += 1
        seq = self._issued_seq
        self._in_flight += 1

        try:
            feed = await self.source.fetch_feed(self.query)
        except FeedUnavailableError as exc:
            logger.warning("Feed refresh #%d failed: %s", seq, exc)
            if self._resolve(seq):
                self._error = exc
        else:
            if self._resolve(seq):
                self._snapshot = FeedSnapshot(
                    feed=feed,
                    fetched_at=datetime.now(UTC),
                    fetched_monotonic=self._clock(),
                )
                self._error = None
        finally:
            self._in_flight -= 1

        state = self.state
        if self.on_update is not None:
            await self.on_update(state)
        return state

    def _resolve(self, seq: int) -> bool:
        if seq < self._resolved_seq:
            logger.debug(
                "Discarding feed response #%d, #%d already resolved",
                seq,
                self._resolved_seq,
            )
            return False
        self._resolved_seq = seq
        return True

    def view(self, tab: FeedTab = FeedTab.ALL) -> list[ConversationViewModel]:
        return refine_feed(self.state.conversations, tab)

    def tab_counts(self) -> dict[FeedTab, int]:
        return tab_counts(self.state.counts)

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="conversation-feed-poller")

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def _run(self) -> None:
        while True:
            try:
                await self.refresh()
            except Exception:
                logger.exception("Feed poll failed")
            await asyncio.sleep(self.interval_seconds)
