"""Main CLI interface."""

import asyncio
from pathlib import Path
from typing import List, Optional
import typer
import structlog
from rich.console import Console
from rich.live import Live
from rich.table import Table

from ..core import IntervalStore, SamplingLoop
from ..data import WeatherSourceError, build_source
from ..models.config import ServiceConfig
from ..models.interval import UpdateInterval, parse_interval, poll_interval_ms
from ..models.reading import ForecastReading, Reading

console = Console()
app = typer.Typer(help="Weather dashboard: mock backend and live sampling loop")

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

FIELD_LABELS = [
    ("temperature", "Temperature", "°C"),
    ("humidity", "Humidity", "%"),
    ("solar_radiation", "Solar Radiation", "W/m²"),
    ("wind_speed", "Wind Speed", "km/h"),
    ("wind_direction", "Wind Direction", "°"),
    ("pressure", "Pressure", "hPa"),
]


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Listening port (default: $PORT or 4000)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level")
):
    """Run the reference weather backend."""
    import uvicorn

    config = _load_config(log_level=log_level)
    _setup_logging(config.log_level, config.log_file)

    if host:
        config.server.host = host
    if port:
        config.server.port = port

    console.print(f"[green]API server listening on http://{config.server.host}:{config.server.port}[/green]")
    uvicorn.run(
        "weather_dashboard.api.server:app",
        host=config.server.host,
        port=config.server.port,
        log_level=config.log_level.lower()
    )


@app.command()
def watch(
    interval: Optional[str] = typer.Option(
        None,
        "--interval",
        "-i",
        help="Update interval in ms (default: last selected)"
    ),
    source: Optional[str] = typer.Option(
        None,
        "--source",
        "-s",
        help="Data source: auto, mock, backend or openweathermap"
    ),
    duration: Optional[float] = typer.Option(
        None,
        "--duration",
        help="Stop after this many seconds (default: run until Ctrl+C)"
    ),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="Persisted settings file"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level")
):
    """Poll the data source and show the live dashboard."""
    config = _load_config(source=source, state_file=state_file, log_level=log_level)
    _setup_logging(config.log_level, config.log_file)

    interval_ms = None
    if interval is not None:
        interval_ms = _parse_interval_option(interval).ms

    try:
        asyncio.run(_run_watch(config, interval_ms, duration))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped.[/yellow]")


@app.command()
def current(
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Data source variant"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level")
):
    """Show the current reading."""
    config = _load_config(source=source, log_level=log_level)
    _setup_logging(config.log_level, config.log_file)

    reading = asyncio.run(_query(config, lambda s: s.get_current_weather()))
    console.print(_reading_table(reading, title="Current Weather Data"))


@app.command()
def history(
    days: int = typer.Option(7, "--days", "-d", min=1, help="Number of days"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Data source variant"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level")
):
    """Show daily historical readings."""
    config = _load_config(source=source, log_level=log_level)
    _setup_logging(config.log_level, config.log_file)

    readings = asyncio.run(_query(config, lambda s: s.get_historical_data(days)))
    console.print(_series_table(readings, title=f"Last {days} days"))


@app.command()
def forecast(
    days: int = typer.Option(3, "--days", "-d", min=1, help="Number of days"),
    source: Optional[str] = typer.Option(None, "--source", "-s", help="Data source variant"),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level")
):
    """Show the mock forecast with confidence scores."""
    config = _load_config(source=source, log_level=log_level)
    _setup_logging(config.log_level, config.log_file)

    points = asyncio.run(_query(config, lambda s: s.get_forecast(days)))
    console.print(_series_table(points, title=f"{days}-day forecast", with_confidence=True))


@app.command()
def intervals(
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="Persisted settings file")
):
    """List the selectable update intervals."""
    config = _load_config(state_file=state_file)
    selected = _interval_store(config).load()

    table = Table(title="Update Intervals")
    table.add_column("", style="yellow")
    table.add_column("Interval (ms)", justify="right", style="cyan")
    table.add_column("Label")
    table.add_column("Description")
    table.add_column("Mode", style="green")
    table.add_column("Poll every (ms)", justify="right")

    for option in UpdateInterval:
        poll_ms = _poll_label(option)
        table.add_row(
            "*" if option is selected else "",
            str(option.ms),
            option.label,
            option.description,
            option.mode.value,
            poll_ms,
        )

    console.print(table)


@app.command("set-interval")
def set_interval(
    interval: str = typer.Argument(..., help="Update interval in ms"),
    state_file: Optional[Path] = typer.Option(None, "--state-file", help="Persisted settings file")
):
    """Persist the update interval used by the next watch."""
    option = _parse_interval_option(interval)
    config = _load_config(state_file=state_file)

    if _interval_store(config).save(option.ms):
        console.print(f"[green]Update interval set to {option.label} ({option.mode.value} mode)[/green]")
    else:
        console.print(f"[yellow]Could not write {config.sampling.state_file}; setting not saved[/yellow]")


async def _run_watch(config: ServiceConfig, interval_ms: Optional[int], duration: Optional[float]) -> None:
    """Run the sampling loop with a live view."""
    source = _build_source(config)
    store = _interval_store(config)
    loop = SamplingLoop(
        source,
        store=store,
        history_limit=config.sampling.history_limit
    )

    try:
        if interval_ms is not None and interval_ms != loop.interval.ms:
            await loop.set_interval(interval_ms)
        else:
            await loop.start()

        with Live(_dashboard(loop), console=console, refresh_per_second=2) as live:
            elapsed = 0.0
            while duration is None or elapsed < duration:
                await asyncio.sleep(0.5)
                elapsed += 0.5
                live.update(_dashboard(loop))
    finally:
        await loop.stop()
        close = getattr(source, "aclose", None)
        if close is not None:
            await close()


async def _query(config: ServiceConfig, call):
    """Run one data source query and close the source."""
    source = _build_source(config)
    try:
        return await call(source)
    except WeatherSourceError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    finally:
        close = getattr(source, "aclose", None)
        if close is not None:
            await close()


def _build_source(config: ServiceConfig):
    try:
        return build_source(config.source)
    except ValueError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(1)


def _dashboard(loop: SamplingLoop) -> Table:
    """Render the loop state."""
    if loop.current is not None:
        table = _reading_table(loop.current, title="Current Weather Data")
    else:
        table = Table(title="Current Weather Data")
        table.add_column("Status")
        table.add_row("Loading weather data...")

    status = "connected" if loop.is_connected else "waiting"
    caption = (
        f"Interval: {loop.interval.label} ({loop.mode.value}) | "
        f"History: {len(loop.history)} | Window: {len(loop.window)} samples | {status}"
    )
    if loop.error:
        caption += f" | [red]Error: {loop.error}[/red]"
    table.caption = caption
    return table


def _reading_table(reading: Reading, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Parameter", style="cyan")
    table.add_column("Value", justify="right", style="green")
    table.add_column("Unit")

    for field, label, unit in FIELD_LABELS:
        table.add_row(label, f"{getattr(reading, field):g}", unit)

    if reading.location_name:
        table.add_row("Location", reading.location_name, "")
    table.add_row("Last updated", reading.timestamp.isoformat(), "")
    return table


def _series_table(readings: List[Reading], title: str, with_confidence: bool = False) -> Table:
    table = Table(title=title)
    table.add_column("Timestamp", style="cyan")
    for _, label, unit in FIELD_LABELS:
        table.add_column(f"{label} ({unit})", justify="right")
    if with_confidence:
        table.add_column("Confidence", justify="right", style="yellow")

    for reading in readings:
        row = [reading.timestamp.isoformat()]
        row += [f"{getattr(reading, field):g}" for field, _, _ in FIELD_LABELS]
        if with_confidence and isinstance(reading, ForecastReading):
            row.append(f"{reading.confidence * 100:.0f}%")
        table.add_row(*row)
    return table


def _interval_store(config: ServiceConfig) -> IntervalStore:
    return IntervalStore(
        config.sampling.state_file,
        default=parse_interval(config.sampling.default_interval_ms)
    )


def _poll_label(option: UpdateInterval) -> str:
    poll_ms = poll_interval_ms(option.ms)
    return "-" if poll_ms is None else str(poll_ms)


def _parse_interval_option(value: str) -> UpdateInterval:
    try:
        return parse_interval(value)
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)


def _load_config(
    source: Optional[str] = None,
    state_file: Optional[Path] = None,
    log_level: Optional[str] = None
) -> ServiceConfig:
    """Load service configuration."""
    config = ServiceConfig.from_env()

    # Override with CLI options
    if source:
        if source not in ("auto", "mock", "backend", "openweathermap"):
            console.print(f"[red]Unknown data source: {source}[/red]")
            raise typer.Exit(1)
        config.source.kind = source
    if state_file:
        config.sampling.state_file = state_file
    if log_level:
        config.log_level = log_level

    return config


def _setup_logging(log_level: str, log_file: Optional[Path]) -> None:
    """Setup logging configuration."""
    import logging

    level = getattr(logging, log_level.upper(), logging.INFO)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
