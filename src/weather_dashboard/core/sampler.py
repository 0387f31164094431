"""Sampling and aggregation loop for live weather readings."""

from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional, Set
import asyncio
import structlog

from ..data.base import WeatherDataSource
from ..models.interval import (
    DEFAULT_INTERVAL,
    SamplingMode,
    UpdateInterval,
    parse_interval,
    poll_interval_ms,
    range_days,
)
from ..models.reading import Reading
from .aggregation import AggregationWindow
from .history import DEFAULT_HISTORY_LIMIT, HistoryBuffer
from .settings import IntervalStore

logger = structlog.get_logger()

Clock = Callable[[], datetime]
Sleep = Callable[[float], Awaitable[Any]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SamplingLoop:
    """Polls a data source and maintains the reading history.

    The active interval selects one of three modes:

    * direct: every polled reading is appended to the history;
    * aggregation: readings are buffered and one average per interval is
      appended;
    * daily range: the history is replaced by one historical fetch and
      nothing is polled.

    All state is owned by the loop and mutated only from its own
    coroutines on a single event loop, so no locking is needed. Scheduled
    polls run as independent tasks and their results are applied in
    completion order.
    """

    def __init__(
        self,
        source: WeatherDataSource,
        *,
        store: Optional[IntervalStore] = None,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        interval_ms: Optional[int] = None,
        clock: Optional[Clock] = None,
        sleep: Optional[Sleep] = None
    ):
        """Initialize the loop.

        Args:
            source: Data source to poll
            store: Where the selected interval is persisted
            history_limit: Maximum number of readings kept in history
            interval_ms: Initial interval; read from ``store`` when omitted
            clock: Returns the current time, used for aggregation windows
            sleep: Awaitable used between scheduled polls
        """
        self.source = source
        self.store = store
        self.history = HistoryBuffer(history_limit)
        self.window = AggregationWindow()
        self._clock = clock or _utcnow
        self._sleep = sleep or asyncio.sleep

        if interval_ms is not None:
            self.interval = parse_interval(interval_ms)
        elif store is not None:
            self.interval = store.load()
        else:
            self.interval = DEFAULT_INTERVAL

        # Display state
        self.current: Optional[Reading] = None
        self.error: Optional[str] = None
        self.loading = False
        self.is_connected = False

        self._running = False
        self._schedule_task: Optional[asyncio.Task] = None
        self._inflight: Set[asyncio.Task] = set()
        # Bumped on every cancellation; work started under an older value is dropped
        self._generation = 0

    @property
    def mode(self) -> SamplingMode:
        return self.interval.mode

    @property
    def poll_ms(self) -> Optional[int]:
        """Current polling cadence, None in daily-range mode."""
        return poll_interval_ms(self.interval.ms)

    @property
    def is_running(self) -> bool:
        return self._running

    async def __aenter__(self) -> "SamplingLoop":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()

    async def start(self) -> None:
        """Enter the mode for the current interval."""
        if self._running:
            logger.warning("Sampling loop is already running")
            return

        self._running = True
        generation = await self._cancel_schedule()
        if generation != self._generation:
            return

        logger.info(
            "Sampling loop started",
            interval_ms=self.interval.ms,
            mode=self.mode.value,
            poll_ms=self.poll_ms
        )
        await self._enter_mode(generation)

    async def stop(self) -> None:
        """Stop polling. Safe to call when nothing is running."""
        await self._cancel_schedule()
        if self._running:
            self._running = False
            logger.info("Sampling loop stopped")

    async def set_interval(self, new_interval_ms: int) -> None:
        """Switch to a new update interval.

        Cancels the running schedule, discards any partial aggregation
        window, persists the interval best-effort and enters the new mode.
        When another change or a stop lands while this one is waiting, the
        later call wins.

        Raises:
            ValueError: if the interval is not one of the enumerated values;
                nothing is changed in that case
        """
        interval = parse_interval(new_interval_ms)

        generation = await self._cancel_schedule()
        if generation != self._generation:
            logger.debug("Interval change superseded", interval_ms=interval.ms)
            return

        self.window.reset()

        previous = self.interval
        self.interval = interval
        self._persist(interval)

        logger.info(
            "Update interval changed",
            previous_ms=previous.ms,
            interval_ms=interval.ms,
            mode=self.mode.value,
            poll_ms=self.poll_ms
        )

        self._running = True
        await self._enter_mode(generation)

    async def poll(self) -> Optional[Reading]:
        """Fetch one current reading and apply the aggregation policy.

        Failures are recorded in ``error`` and leave the history and the
        aggregation window untouched. Never raises for source failures.
        A reading that arrives after the interval changed is dropped.

        Returns:
            The fetched reading, or None if the fetch failed or was dropped
        """
        return await self._poll(self._generation)

    async def _poll(self, generation: int) -> Optional[Reading]:
        self.loading = True
        try:
            reading = await self.source.get_current_weather()
        except Exception as e:
            if generation != self._generation:
                return None
            self.error = str(e) or type(e).__name__
            logger.warning(
                "Weather poll failed",
                error=self.error,
                interval_ms=self.interval.ms
            )
            return None
        finally:
            self.loading = False

        if generation != self._generation:
            logger.debug("Dropping reading from a previous interval")
            return None

        self.current = reading
        self.error = None
        self.is_connected = True
        self._apply(reading)
        return reading

    def _apply(self, reading: Reading) -> None:
        mode = self.mode
        if mode is SamplingMode.DIRECT:
            self.history.append(reading)
        elif mode is SamplingMode.AGGREGATION:
            now = self._clock()
            self.window.open(now)
            self.window.add(reading)
            if self.window.is_due(now, self.interval.ms):
                samples = len(self.window)
                averaged = self.window.close(now)
                self.history.append(averaged)
                logger.debug(
                    "Aggregation window closed",
                    samples=samples,
                    interval_ms=self.interval.ms,
                    history_size=len(self.history)
                )

    async def _enter_mode(self, generation: int) -> None:
        self.window.reset()

        if self.mode is SamplingMode.DAILY_RANGE:
            await self._load_daily_range(generation)
            return

        await self._poll(generation)
        # Stopped or switched while the first poll was out
        if generation != self._generation:
            return
        self._schedule_task = asyncio.create_task(
            self._run_schedule(self.poll_ms, generation)
        )

    async def _load_daily_range(self, generation: int) -> None:
        days = range_days(self.interval.ms)
        self.loading = True
        try:
            fetched = await self.source.get_historical_data(days)
            readings = [Reading.model_validate(item) for item in fetched]
        except Exception as e:
            if generation == self._generation:
                self.error = str(e) or type(e).__name__
                logger.warning("Historical fetch failed", days=days, error=self.error)
            return
        finally:
            self.loading = False

        if generation != self._generation:
            logger.debug("Dropping history from a previous interval", days=days)
            return

        self.history.replace(readings)
        self.error = None
        logger.info("History replaced with daily range", days=days, data_points=len(readings))

    async def _run_schedule(self, poll_ms: int, generation: int) -> None:
        """Background task firing a poll every ``poll_ms``."""
        while True:
            try:
                await self._sleep(poll_ms / 1000)
                task = asyncio.create_task(self._poll(generation))
                self._inflight.add(task)
                task.add_done_callback(self._inflight.discard)
            except asyncio.CancelledError:
                break

    async def _cancel_schedule(self) -> int:
        """Cancel the schedule and in-flight polls.

        Returns:
            The generation that results from this cancellation; it stays
            current until the next cancellation
        """
        self._generation += 1
        generation = self._generation

        task, self._schedule_task = self._schedule_task, None
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)

        pending = list(self._inflight)
        self._inflight.clear()
        for poll_task in pending:
            poll_task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        return generation

    def _persist(self, interval: UpdateInterval) -> None:
        if self.store is None:
            return
        if not self.store.save(interval.ms):
            logger.debug("Interval not persisted", interval_ms=interval.ms)

    def snapshot(self) -> Dict[str, Any]:
        """Read-only view of the loop state for the rendering layer."""
        return {
            "current": self.current.to_wire() if self.current else None,
            "history": [reading.to_wire() for reading in self.history],
            "intervalMs": self.interval.ms,
            "mode": self.mode.value,
            "pollMs": self.poll_ms,
            "loading": self.loading,
            "error": self.error,
            "isConnected": self.is_connected,
            "window": {
                "start": self.window.start.isoformat() if self.window.start else None,
                "samples": len(self.window),
            },
        }
