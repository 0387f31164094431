"""Update interval settings and the sampling mode they select."""

from enum import Enum
from typing import Optional, Union

SECOND_MS = 1_000
MINUTE_MS = 60 * SECOND_MS
DAY_MS = 86_400_000

# Mode thresholds
AGGREGATION_THRESHOLD_MS = 5 * MINUTE_MS
DAILY_RANGE_THRESHOLD_MS = DAY_MS

# Polling cadence bounds
MIN_DIRECT_POLL_MS = 1_000
MAX_DIRECT_POLL_MS = 15_000
MAX_AGGREGATION_POLL_MS = 30_000
SAMPLES_PER_WINDOW = 6


class SamplingMode(str, Enum):
    """Polling strategy selected by the interval magnitude."""
    DIRECT = "direct"
    AGGREGATION = "aggregation"
    DAILY_RANGE = "daily_range"


class UpdateInterval(int, Enum):
    """Selectable update intervals in milliseconds."""
    ONE_SECOND = 1_000
    FIFTEEN_SECONDS = 15_000
    THIRTY_SECONDS = 30_000
    ONE_MINUTE = 60_000
    FIVE_MINUTES = 300_000
    FIFTEEN_MINUTES = 900_000
    THIRTY_MINUTES = 1_800_000
    SIXTY_MINUTES = 3_600_000
    ONE_DAY = DAY_MS
    TEN_DAYS = DAY_MS * 10
    ONE_MONTH = DAY_MS * 30

    @property
    def ms(self) -> int:
        return int(self.value)

    @property
    def label(self) -> str:
        return _LABELS[self][0]

    @property
    def description(self) -> str:
        return _LABELS[self][1]

    @property
    def mode(self) -> SamplingMode:
        return mode_for(self.ms)


_LABELS = {
    UpdateInterval.ONE_SECOND: ("1 sec", "Ultra real-time"),
    UpdateInterval.FIFTEEN_SECONDS: ("15 sec", "Very high frequency"),
    UpdateInterval.THIRTY_SECONDS: ("30 sec", "High frequency"),
    UpdateInterval.ONE_MINUTE: ("1 min", "Standard"),
    UpdateInterval.FIVE_MINUTES: ("5 min", "Balanced"),
    UpdateInterval.FIFTEEN_MINUTES: ("15 min", "Low frequency"),
    UpdateInterval.THIRTY_MINUTES: ("30 min", "Lower frequency"),
    UpdateInterval.SIXTY_MINUTES: ("60 min", "Hourly updates"),
    UpdateInterval.ONE_DAY: ("1 day", "Daily summary"),
    UpdateInterval.TEN_DAYS: ("10 days", "Decadal summary"),
    UpdateInterval.ONE_MONTH: ("1 month", "Monthly summary"),
}

DEFAULT_INTERVAL = UpdateInterval.ONE_SECOND


def mode_for(interval_ms: int) -> SamplingMode:
    """Select the sampling mode for an interval."""
    if interval_ms >= DAILY_RANGE_THRESHOLD_MS:
        return SamplingMode.DAILY_RANGE
    if interval_ms >= AGGREGATION_THRESHOLD_MS:
        return SamplingMode.AGGREGATION
    return SamplingMode.DIRECT


def poll_interval_ms(interval_ms: int) -> Optional[int]:
    """Polling cadence for an interval, or None when nothing is polled.

    The cadence only controls how many samples feed each average; the
    history granularity is still one point per interval.
    """
    mode = mode_for(interval_ms)
    if mode is SamplingMode.DAILY_RANGE:
        return None
    if mode is SamplingMode.AGGREGATION:
        return min(MAX_AGGREGATION_POLL_MS, interval_ms // SAMPLES_PER_WINDOW)
    return max(MIN_DIRECT_POLL_MS, min(MAX_DIRECT_POLL_MS, interval_ms))


def range_days(interval_ms: int) -> int:
    """Number of days of history fetched in daily-range mode."""
    return max(1, interval_ms // DAY_MS)


def parse_interval(value: Union[int, str, None]) -> UpdateInterval:
    """Parse a stored or user supplied interval.

    Raises:
        ValueError: if the value is not a whole number of milliseconds
            from the enumerated set
    """
    if value is None:
        raise ValueError("Interval is missing")
    if isinstance(value, bool):
        raise ValueError(f"Invalid interval: {value!r}")
    try:
        interval_ms = int(str(value).strip())
    except ValueError:
        raise ValueError(f"Invalid interval: {value!r}") from None
    try:
        return UpdateInterval(interval_ms)
    except ValueError:
        allowed = ", ".join(str(i.ms) for i in UpdateInterval)
        raise ValueError(f"Unsupported interval {interval_ms} ms (expected one of: {allowed})") from None
