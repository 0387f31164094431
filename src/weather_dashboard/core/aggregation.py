"""Windowed averaging of readings."""

from datetime import datetime
from typing import List, Optional, Sequence
import numpy as np

from ..models.reading import NUMERIC_FIELDS, Reading


def average_readings(readings: Sequence[Reading], timestamp: datetime) -> Reading:
    """Average every numeric field over ``readings``.

    Means are rounded to 2 decimal places and the result is stamped with
    ``timestamp``.

    Raises:
        ValueError: if ``readings`` is empty
    """
    if not readings:
        raise ValueError("Cannot average an empty set of readings")

    matrix = np.array(
        [[getattr(reading, field) for field in NUMERIC_FIELDS] for reading in readings],
        dtype=float
    )
    means = matrix.mean(axis=0)

    return Reading(
        **{field: round(float(mean), 2) for field, mean in zip(NUMERIC_FIELDS, means)},
        timestamp=timestamp,
    )


class AggregationWindow:
    """Readings accumulated since the window opened.

    ``start`` is None while no window is open.
    """

    def __init__(self):
        self.start: Optional[datetime] = None
        self.readings: List[Reading] = []

    @property
    def is_open(self) -> bool:
        return self.start is not None

    def open(self, now: datetime) -> None:
        """Open the window at ``now`` unless one is already open."""
        if self.start is None:
            self.start = now

    def add(self, reading: Reading) -> None:
        self.readings.append(reading)

    def elapsed_ms(self, now: datetime) -> float:
        if self.start is None:
            return 0.0
        return (now - self.start).total_seconds() * 1000

    def is_due(self, now: datetime, interval_ms: int) -> bool:
        """Whether the window has lasted at least ``interval_ms``."""
        return self.is_open and self.elapsed_ms(now) >= interval_ms

    def close(self, now: datetime) -> Reading:
        """Average the buffered readings and restart the window at ``now``.

        The new window starts empty: the sample that triggered the close
        belongs to the average just produced.
        """
        averaged = average_readings(self.readings, now)
        self.start = now
        self.readings = []
        return averaged

    def reset(self) -> None:
        """Discard any partial window."""
        self.start = None
        self.readings = []

    def __len__(self) -> int:
        return len(self.readings)
