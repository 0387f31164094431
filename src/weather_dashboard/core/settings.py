"""Persisted update interval."""

import json
from pathlib import Path
from typing import Union
import structlog

from ..models.interval import DEFAULT_INTERVAL, UpdateInterval, parse_interval

logger = structlog.get_logger()

INTERVAL_KEY = "updateIntervalMs"


class IntervalStore:
    """Keeps the last selected interval in a small JSON file.

    The interval is stored as a string under ``updateIntervalMs``. Reads
    fall back to the default on any problem and writes are best-effort.
    """

    def __init__(
        self,
        path: Union[str, Path],
        default: UpdateInterval = DEFAULT_INTERVAL
    ):
        self.path = Path(path)
        self.default = default

    def load(self) -> UpdateInterval:
        """Return the stored interval, or the default if absent or unusable."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return parse_interval(data[INTERVAL_KEY])
        except FileNotFoundError:
            return self.default
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.debug(
                "Ignoring unusable stored interval",
                path=str(self.path),
                error=str(e)
            )
            return self.default

    def save(self, interval_ms: int) -> bool:
        """Persist the interval; failures are logged and reported, never raised."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                json.dumps({INTERVAL_KEY: str(int(interval_ms))}),
                encoding="utf-8"
            )
            return True
        except (OSError, TypeError, ValueError) as e:
            logger.debug("Could not persist interval", path=str(self.path), error=str(e))
            return False
