"""Bounded history of readings."""

from collections import deque
from typing import Deque, Iterable, Iterator, List, Optional

from ..models.reading import Reading

DEFAULT_HISTORY_LIMIT = 300


class HistoryBuffer:
    """Ordered readings, oldest first, evicting the oldest past ``max_size``."""

    def __init__(self, max_size: int = DEFAULT_HISTORY_LIMIT):
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._readings: Deque[Reading] = deque(maxlen=max_size)
        self.evictions = 0

    def append(self, reading: Reading) -> None:
        """Add a reading at the end, evicting the oldest if full."""
        if len(self._readings) == self.max_size:
            self.evictions += 1
        self._readings.append(reading)

    def replace(self, readings: Iterable[Reading]) -> None:
        """Replace the whole history.

        Only the newest ``max_size`` readings are kept if more are given.
        """
        self._readings = deque(readings, maxlen=self.max_size)

    def clear(self) -> None:
        self._readings.clear()

    @property
    def latest(self) -> Optional[Reading]:
        return self._readings[-1] if self._readings else None

    def to_list(self) -> List[Reading]:
        """Copy of the readings for the rendering layer."""
        return list(self._readings)

    def __len__(self) -> int:
        return len(self._readings)

    def __iter__(self) -> Iterator[Reading]:
        return iter(list(self._readings))

    def __getitem__(self, index: int) -> Reading:
        return self._readings[index]
