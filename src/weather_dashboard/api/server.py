"""
Reference weather backend.

Serves freshly randomized readings as JSON. Runs with:
uvicorn weather_dashboard.api.server:app --port 4000
"""

from datetime import datetime, timezone
from typing import List, Optional

import structlog
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..data.generator import BACKEND_PROFILE, ReadingGenerator
from ..models.config import ServerConfig
from ..models.reading import Reading

logger = structlog.get_logger()

DEFAULT_HISTORY_DAYS = 7


def parse_days(raw: Optional[str]) -> int:
    """Day count from the query string; anything unusable means 7."""
    if raw is None:
        return DEFAULT_HISTORY_DAYS
    try:
        days = int(raw.strip())
    except ValueError:
        return DEFAULT_HISTORY_DAYS
    return days if days > 0 else DEFAULT_HISTORY_DAYS


def create_app(
    generator: Optional[ReadingGenerator] = None,
    config: Optional[ServerConfig] = None
) -> FastAPI:
    """Build the backend application."""
    generator = generator or ReadingGenerator(BACKEND_PROFILE)
    config = config or ServerConfig()

    app = FastAPI(
        title="Weather Dashboard API",
        version=__version__,
        description="Mock weather readings for the dashboard."
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/api/current", response_model=Reading, response_model_exclude_none=True)
    def current() -> Reading:
        """One freshly randomized reading."""
        return generator.reading(datetime.now(timezone.utc))

    @app.get("/api/historical", response_model=List[Reading], response_model_exclude_none=True)
    def historical(days: Optional[str] = Query(None, description="Days of history, default 7")) -> List[Reading]:
        """Daily readings from ``now - days`` to now, ascending."""
        count = parse_days(days)
        readings = generator.historical(count, datetime.now(timezone.utc))
        logger.debug("Served historical readings", days=count, data_points=len(readings))
        return readings

    @app.get("/api/health")
    def health() -> dict:
        """Liveness check."""
        return {"status": "ok"}

    return app


app = create_app()
