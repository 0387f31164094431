"""
Weather Dashboard

Mock weather backend, interchangeable data sources and a sampling loop
that turns polled readings into a bounded, optionally averaged history.
"""

__version__ = "0.1.0"

from .core import SamplingLoop, HistoryBuffer, IntervalStore
from .models import Reading, ServiceConfig, UpdateInterval, SamplingMode

__all__ = [
    "SamplingLoop",
    "HistoryBuffer",
    "IntervalStore",
    "Reading",
    "ServiceConfig",
    "UpdateInterval",
    "SamplingMode",
]
