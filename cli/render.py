from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
    if not headers:
        typer.echo("No data available.")
        return
    widths = [len(str(header)) for header in headers]
    for row in rows:
        for index, cell in enumerate(row[: len(widths)]):
            widths[index] = max(widths[index], len(str(cell)))

    def line(cells: Sequence[Any]) -> str:
        return "  ".join(str(cell).ljust(width) for cell, width in zip(cells, widths)).rstrip()

    typer.echo(line(headers))
    typer.echo("  ".join("-" * width for width in widths))
    for row in rows:
        typer.echo(line(row))


def _render_payload_table(payload: Dict[str, Any]) -> None:
    table = payload.get("table") or {}
    render_table(table.get("headers") or [], table.get("rows") or [])


def render_rose(payload: Dict[str, Any]) -> None:
    echo_heading(f"Rose: {payload.get('pollutant')} ({payload.get('direction')})")
    _render_payload_table(payload)
    shares = payload.get("per_category") or []
    typer.echo()
    echo_heading("Legend")
    if any(share.get("count") for share in shares):
        for share in shares:
            typer.echo(f"  - {share.get('name')}: {share.get('percent')}% ({share.get('count')})")
    else:
        typer.echo("No classified samples.")


def render_histogram(payload: Dict[str, Any]) -> None:
    echo_heading(f"Histogram: {payload.get('pollutant')}")
    _render_payload_table(payload)


def render_parallel(payload: Dict[str, Any]) -> None:
    echo_heading(f"Parallel view: {payload.get('pollutant')} @ {int(payload.get('hour') or 0):02d}:00")
    _render_payload_table(payload)
    labels = payload.get("station_labels") or {}
    plotted = {labels.get(station, station) for station in payload.get("series") or {}}
    missing = [
        header
        for header in (payload.get("table") or {}).get("headers", [])[1:]
        if header not in plotted
    ]
    if missing:
        typer.echo()
        typer.echo(f"No samples at this hour for: {', '.join(missing)}")


def render_dual_axis(payload: Dict[str, Any]) -> None:
    echo_heading(f"Dual axis: {payload.get('primary_label')} / {payload.get('secondary_label')}")
    _render_payload_table(payload)


def render_scatter(payload: Dict[str, Any]) -> None:
    echo_heading(f"Scatter: {payload.get('label')}")
    points = payload.get("points") or []
    _render_payload_table(payload)
    if points:
        typer.echo()
        typer.echo(f"{len(points)} paired readings")


def render_calendar(payload: Dict[str, Any]) -> None:
    echo_heading(f"Calendar: {payload.get('pollutant')}")
    months = payload.get("months") or []
    if not months:
        typer.echo("No data available.")
        return
    for month in months:
        typer.echo()
        echo_heading(month.get("label", ""))
        cells = ["    "] * int(month.get("leading_blanks") or 0)
        for cell in month.get("cells") or []:
            value = cell.get("value")
            cells.append(f"{cell.get('date', '')[-2:]}:{'--' if value is None else value}")
        for start in range(0, len(cells), 7):
            typer.echo("  ".join(cells[start : start + 7]))


def render_categories(payload: Dict[str, Any]) -> None:
    echo_heading(f"Categories: {payload.get('pollutant')}")
    bands = payload.get("bands") or []
    render_table(
        ["Name", "Range", "Kind"],
        [[band.get("name", ""), band.get("range", ""), band.get("kind", "")] for band in bands],
    )
