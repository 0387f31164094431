"""HTTP reference backend."""

from .server import create_app, parse_days

__all__ = ["create_app", "parse_days"]
