"""Display names for station identifiers."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from settings import get_settings

logger = logging.getLogger(__name__)

StationLabels = Dict[str, str]


def load_station_labels(path: Optional[Path] = None) -> StationLabels:
    """Read a ``{"<station id>": "<display name>"}`` JSON file; no path means no labels."""
    if path is None:
        return {}

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Unable to read station labels from {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Station labels in {path} must be a JSON object.")
    labels: StationLabels = {}
    for station, name in payload.items():
        if not isinstance(name, str):
            raise ValueError(f"Label for station {station!r} must be a string.")
        if name.strip():
            labels[str(station)] = name.strip()

    logger.info("Loaded %d station labels from %s", len(labels), path)
    return labels


@lru_cache
def build_default_station_labels() -> StationLabels:
    settings = get_settings()
    path = Path(settings.station_labels_path) if settings.station_labels_path else None
    return load_station_labels(path)
