from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Sequence

import httpx
import typer

from cli.config import CLIConfig


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class ApiClient:
    """Minimal HTTP client for the analytics service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def categories(self, pollutant: str) -> Dict[str, Any]:
        return self._get(f"/categories/{pollutant}")

    def rose(
        self,
        station: str,
        pollutant: str,
        sectors: int = 8,
        direction: str = "from",
        window: str = "daily",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        params = {
            "pollutant": pollutant,
            "sectors": sectors,
            "direction": direction,
            "window": window,
            "start": _iso(start),
            "end": _iso(end),
        }
        return self._get(f"/stations/{station}/rose", params)

    def histogram(
        self,
        stations: Sequence[str],
        pollutant: str,
        start: datetime,
        end: datetime,
        bins: Optional[int] = None,
    ) -> Dict[str, Any]:
        params = {
            "stations": list(stations),
            "pollutant": pollutant,
            "start": _iso(start),
            "end": _iso(end),
            "bins": bins,
        }
        return self._get("/histogram", params)

    def parallel(
        self,
        stations: Sequence[str],
        pollutant: str,
        hour: int,
        start: datetime,
        end: datetime,
    ) -> Dict[str, Any]:
        params = {
            "stations": list(stations),
            "pollutant": pollutant,
            "hour": hour,
            "start": _iso(start),
            "end": _iso(end),
        }
        return self._get("/parallel", params)

    def calendar(self, station: str, pollutant: str, start: datetime, end: datetime) -> Dict[str, Any]:
        params = {"pollutant": pollutant, "start": _iso(start), "end": _iso(end)}
        return self._get(f"/stations/{station}/calendar", params)

    def dual_axis(
        self,
        station: str,
        primary: str,
        secondary: str,
        window: str = "daily",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        params = {
            "primary": primary,
            "secondary": secondary,
            "window": window,
            "start": _iso(start),
            "end": _iso(end),
        }
        return self._get(f"/stations/{station}/dual-axis", params)

    def scatter(
        self,
        station: str,
        x: str,
        y: str,
        window: str = "daily",
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        params = {"x": x, "y": y, "window": window, "start": _iso(start), "end": _iso(end)}
        return self._get(f"/stations/{station}/scatter", params)

    def _get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        query: Dict[str, Any] = {
            key: value for key, value in (params or {}).items() if value is not None
        }
        try:
            response = self._client.get(path, params=query)
            if response.status_code == 404:
                raise typer.BadParameter(f"Resource {path} was not found.")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.TransportError as exc:
            typer.secho(f"Could not reach {self._config.base_url}: {exc}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1) from exc
        return response.json()

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> None:
        detail: Any = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        if isinstance(detail, list):
            detail = "; ".join(str(item.get("msg", item)) if isinstance(item, dict) else str(item) for item in detail)
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
