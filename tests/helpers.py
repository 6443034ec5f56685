"""
Test helpers: raw-table builders and a dictionary-backed continent classifier.
"""

from __future__ import annotations

from typing import Optional

import polars as pl

from src.contracts.schemas import SOURCE_COLUMNS

SOURCE_STATE, SOURCE_COUNTRY, SOURCE_CITY, SOURCE_ISSUED, SOURCE_NOT_ISSUED = list(SOURCE_COLUMNS)

RAW_SCHEMA = {
    SOURCE_STATE: pl.Utf8,
    SOURCE_COUNTRY: pl.Utf8,
    SOURCE_CITY: pl.Utf8,
    SOURCE_ISSUED: pl.Int64,
    SOURCE_NOT_ISSUED: pl.Int64,
}


def make_raw(rows: list[tuple]) -> pl.DataFrame:
    """Raw table with normalized source headers from (state, country, city, issued, not_issued) tuples."""
    return pl.DataFrame(rows, schema=RAW_SCHEMA, orient="row")


def make_records(rows: list[tuple]) -> pl.DataFrame:
    """Selected visa records from (state, country, city, issued, not_issued) tuples."""
    return pl.DataFrame(
        rows,
        schema={
            "schengen_state": pl.Utf8,
            "consulate_country": pl.Utf8,
            "consulate_city": pl.Utf8,
            "issued": pl.Int64,
            "not_issued": pl.Int64,
        },
        orient="row",
    )


class StubClassifier:
    """Continent classifier backed by a fixed dict; records every lookup."""

    def __init__(self, mapping: dict[str, str]):
        self.mapping = mapping
        self.calls: list[str] = []

    def classify(self, name: str) -> Optional[str]:
        self.calls.append(name)
        return self.mapping.get(name)
