"""
Ingest the raw consulate spreadsheet, normalize headers, select the visa columns.
"""

import re
from pathlib import Path

import polars as pl

from src.contracts.schemas import (
    NULL_MARKERS,
    RAW_INPUT_PATH,
    SELECTED_SCHEMA,
    SOURCE_COLUMNS,
)


class SchemaError(ValueError):
    """Raised when the raw table cannot be shaped into visa records."""


_NON_ALNUM = re.compile(r"[^0-9a-z]+")


def normalize_column_name(name: str) -> str:
    """'Country where consulate is located' -> 'country_where_consulate_is_located'."""
    return _NON_ALNUM.sub("_", str(name).strip().lower()).strip("_")


def normalize_columns(df: pl.DataFrame) -> pl.DataFrame:
    """Rename every column of df to its normalized form."""
    return df.rename({col: normalize_column_name(col) for col in df.columns})


def read_raw_table(path: str | Path) -> pl.DataFrame:
    """Read a spreadsheet export by suffix: .xlsx/.xls, .csv or .parquet."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Raw visa table not found: {path}")

    suffix = path.suffix.lower()
    if suffix in (".xlsx", ".xls"):
        return pl.read_excel(path)
    if suffix == ".csv":
        return pl.read_csv(path, null_values=NULL_MARKERS, infer_schema_length=10_000)
    if suffix == ".parquet":
        return pl.read_parquet(path)
    raise ValueError(f"Unsupported raw table format '{suffix}' for {path}")


def select_visa_columns(df: pl.DataFrame, columns: dict[str, str] = SOURCE_COLUMNS) -> pl.DataFrame:
    """
    Stage A: keep exactly the mapped source columns, renamed and cast to SELECTED_SCHEMA.

    Raises SchemaError naming the first source column that is absent or cannot be cast.
    """
    unmapped = [target for target in SELECTED_SCHEMA if target not in columns.values()]
    if unmapped:
        raise SchemaError(f"Column mapping has no source for: {', '.join(unmapped)}")

    for source in columns:
        if source not in df.columns:
            raise SchemaError(f"Missing required column: {source}")

    exprs = []
    for source, target in columns.items():
        dtype = SELECTED_SCHEMA.get(target, pl.Utf8)
        exprs.append(pl.col(source).cast(dtype).alias(target))

    try:
        selected = df.select(exprs)
    except pl.exceptions.PolarsError as exc:
        raise SchemaError(f"Could not cast source columns to {list(SELECTED_SCHEMA)}: {exc}") from exc
    return selected.select(list(SELECTED_SCHEMA.keys()))


def load_raw_visa_table(path: str | Path = RAW_INPUT_PATH, fallback_to_mock: bool = False) -> pl.DataFrame:
    """
    Load the raw spreadsheet with normalized headers.
    Falls back to synthetic data if the file is absent and fallback_to_mock is set.
    """
    if Path(path).exists() or not fallback_to_mock:
        df = read_raw_table(path)
    else:
        from src.data_generator.generate import generate_consulate_table

        print(f"[ingest] {path} not found — generating mock consulate data")
        df = generate_consulate_table()
    return normalize_columns(df)
