"""Severity classification against ordered band tables."""

from __future__ import annotations

from typing import Mapping, Optional

from models.categories import Band, CategoryTable


def classify_index(value: float, table: Optional[CategoryTable]) -> Optional[int]:
    """Return the position of the first band containing ``value``.

    When nothing matches, the last band acts as an open-ended ceiling, so a
    value below the first band's floor also lands there. A missing or empty
    table yields ``None``.
    """
    if not table:
        return None
    for index, band in enumerate(table):
        if band.contains(value):
            return index
    return len(table) - 1


def classify(value: float, table: Optional[CategoryTable]) -> Optional[Band]:
    index = classify_index(value, table)
    if index is None or table is None:
        return None
    return table[index]


class CategoryClassifier:
    """Classifier bound to an injected set of per-pollutant tables."""

    def __init__(self, tables: Mapping[str, CategoryTable]) -> None:
        self._tables = dict(tables)

    def table_for(self, pollutant: str) -> CategoryTable:
        return self._tables.get(pollutant, ())

    def has_table(self, pollutant: str) -> bool:
        return bool(self._tables.get(pollutant))

    def classify(self, value: float, pollutant: str) -> Optional[Band]:
        return classify(value, self._tables.get(pollutant))

    def classify_index(self, value: float, pollutant: str) -> Optional[int]:
        return classify_index(value, self._tables.get(pollutant))
