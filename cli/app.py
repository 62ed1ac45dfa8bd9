from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import (
    render_calendar,
    render_categories,
    render_dual_axis,
    render_histogram,
    render_parallel,
    render_rose,
    render_scatter,
)


class Direction(str, Enum):
    from_ = "from"
    to = "to"


class Window(str, Enum):
    daily = "daily"
    monthly = "monthly"
    periodic = "periodic"


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Query rose, histogram, parallel-hour, calendar and pollutant comparison aggregates from the analytics service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

_POLLUTANT_OPTION = typer.Option("AQI", "--pollutant", "-p", help="Pollutant key, e.g. AQI, PM25, NO2.")


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Analytics API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each API response.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("rose")
def rose_command(
    ctx: typer.Context,
    station: str = typer.Argument(..., help="Station identifier."),
    pollutant: str = _POLLUTANT_OPTION,
    sectors: int = typer.Option(8, "--sectors", min=1, max=36, help="Number of compass sectors."),
    direction: Direction = typer.Option(Direction.from_, "--direction", help="Bin by where wind comes from or goes to."),
    window: Window = typer.Option(Window.daily, "--window", help="History window to fetch."),
    start: Optional[datetime] = typer.Option(None, "--start", help="Start of a periodic window."),
    end: Optional[datetime] = typer.Option(None, "--end", help="End of a periodic window."),
) -> None:
    """Show the per-direction severity distribution for a station."""
    state = _get_state(ctx)
    payload = state.client.rose(
        station,
        pollutant,
        sectors=sectors,
        direction=direction.value,
        window=window.value,
        start=start,
        end=end,
    )
    render_rose(payload)


@app.command("histogram")
def histogram_command(
    ctx: typer.Context,
    stations: List[str] = typer.Argument(..., help="One or more station identifiers."),
    pollutant: str = _POLLUTANT_OPTION,
    start: datetime = typer.Option(..., "--start", help="Start of the period."),
    end: datetime = typer.Option(..., "--end", help="End of the period."),
    bins: Optional[int] = typer.Option(None, "--bins", min=1, help="Number of bins."),
) -> None:
    """Compare value distributions across stations over shared bins."""
    state = _get_state(ctx)
    payload = state.client.histogram(stations, pollutant, start, end, bins=bins)
    render_histogram(payload)


@app.command("parallel")
def parallel_command(
    ctx: typer.Context,
    stations: List[str] = typer.Argument(..., help="One or more station identifiers."),
    pollutant: str = _POLLUTANT_OPTION,
    hour: int = typer.Option(12, "--hour", min=0, max=23, help="Clock hour to compare."),
    start: datetime = typer.Option(..., "--start", help="First day."),
    end: datetime = typer.Option(..., "--end", help="Last day."),
) -> None:
    """Compare one clock hour across days and stations."""
    state = _get_state(ctx)
    payload = state.client.parallel(stations, pollutant, hour, start, end)
    render_parallel(payload)


@app.command("calendar")
def calendar_command(
    ctx: typer.Context,
    station: str = typer.Argument(..., help="Station identifier."),
    pollutant: str = _POLLUTANT_OPTION,
    start: datetime = typer.Option(..., "--start", help="First day."),
    end: datetime = typer.Option(..., "--end", help="Last day."),
) -> None:
    """Print daily values as month grids."""
    state = _get_state(ctx)
    payload = state.client.calendar(station, pollutant, start, end)
    render_calendar(payload)


@app.command("dual-axis")
def dual_axis_command(
    ctx: typer.Context,
    station: str = typer.Argument(..., help="Station identifier."),
    primary: str = typer.Option("AQI", "--primary", help="Pollutant on the left axis."),
    secondary: str = typer.Option("PM25", "--secondary", help="Pollutant on the right axis."),
    window: Window = typer.Option(Window.daily, "--window", help="History window to fetch."),
    start: Optional[datetime] = typer.Option(None, "--start", help="Start of a periodic window."),
    end: Optional[datetime] = typer.Option(None, "--end", help="End of a periodic window."),
) -> None:
    """Show two pollutants over time side by side."""
    state = _get_state(ctx)
    payload = state.client.dual_axis(station, primary, secondary, window=window.value, start=start, end=end)
    render_dual_axis(payload)


@app.command("scatter")
def scatter_command(
    ctx: typer.Context,
    station: str = typer.Argument(..., help="Station identifier."),
    x: str = typer.Option("AQI", "--x", help="Pollutant on the horizontal axis."),
    y: str = typer.Option("PM25", "--y", help="Pollutant on the vertical axis."),
    window: Window = typer.Option(Window.daily, "--window", help="History window to fetch."),
    start: Optional[datetime] = typer.Option(None, "--start", help="Start of a periodic window."),
    end: Optional[datetime] = typer.Option(None, "--end", help="End of a periodic window."),
) -> None:
    """Pair two pollutants reading by reading."""
    state = _get_state(ctx)
    payload = state.client.scatter(station, x, y, window=window.value, start=start, end=end)
    render_scatter(payload)


@app.command("categories")
def categories_command(
    ctx: typer.Context,
    pollutant: str = typer.Argument(..., help="Pollutant key."),
) -> None:
    """List the severity bands for a pollutant."""
    state = _get_state(ctx)
    render_categories(state.client.categories(pollutant))
