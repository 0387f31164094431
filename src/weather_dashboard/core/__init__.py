"""Core sampling components."""

from .aggregation import AggregationWindow, average_readings
from .history import HistoryBuffer, DEFAULT_HISTORY_LIMIT
from .sampler import SamplingLoop
from .settings import IntervalStore, INTERVAL_KEY

__all__ = [
    "AggregationWindow",
    "average_readings",
    "HistoryBuffer",
    "DEFAULT_HISTORY_LIMIT",
    "SamplingLoop",
    "IntervalStore",
    "INTERVAL_KEY",
]
