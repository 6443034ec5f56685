"""
Cleaning stages: each one is a pure DataFrame -> DataFrame step with a single policy.

  drop_missing_country  rows without a consulate country cannot be aggregated or mapped
  fill_missing_counts   blank issued / not_issued cells mean zero activity
  derive_rates          tot_application and rej_rate (null when nothing was applied for)
"""

import polars as pl

from src.contracts.schemas import COUNT_DEFAULTS
from src.pipeline.ingest import SchemaError


def drop_missing_country(df: pl.DataFrame) -> pl.DataFrame:
    """
    Stage B: strip surrounding whitespace from consulate_country, then remove
    records where it is null or blank.

    Lossy on purpose: where an application was lodged cannot be reconstructed.
    """
    stripped = df.with_columns(pl.col("consulate_country").str.strip_chars())
    has_country = pl.col("consulate_country").str.len_chars() > 0
    return stripped.filter(has_country.fill_null(False))


def fill_missing_counts(df: pl.DataFrame, defaults: dict[str, int] = COUNT_DEFAULTS) -> pl.DataFrame:
    """Stage C: default missing counts. Only the columns named in defaults are touched."""
    return df.with_columns([
        pl.col(col).fill_null(pl.lit(value, dtype=pl.Int64)).alias(col)
        for col, value in defaults.items()
    ])


def derive_rates(df: pl.DataFrame) -> pl.DataFrame:
    """
    Stage D: add tot_application and rej_rate.

    rej_rate is null (the "no rate" marker) when tot_application == 0, never NaN.
    """
    for col in ("issued", "not_issued"):
        n_negative = df.filter(pl.col(col) < 0).height
        if n_negative:
            raise SchemaError(f"Column '{col}' has {n_negative} negative count(s)")

    with_totals = df.with_columns(
        (pl.col("issued") + pl.col("not_issued")).cast(pl.Int64).alias("tot_application")
    )
    return with_totals.with_columns(
        pl.when(pl.col("tot_application") > 0)
          .then(pl.col("not_issued").cast(pl.Float64) / pl.col("tot_application").cast(pl.Float64))
          .otherwise(pl.lit(None, dtype=pl.Float64))
          .alias("rej_rate")
    )
