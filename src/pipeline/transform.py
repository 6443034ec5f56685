"""
Rejection-rate rollups: country ranking for presentation order, continent summary.
"""

import polars as pl

from src.contracts.schemas import CONTINENT_SUMMARY_SCHEMA, COUNTRY_RANKING_SCHEMA


# Only records with a defined rate carry weight. Zero-application records count in
# volumes but never enter a weighted mean, so no aggregate divides by zero.
_RATED = pl.col("rej_rate").is_not_null() & (pl.col("tot_application") > 0)


def _weighted_rate_parts() -> list[pl.Expr]:
    return [
        (pl.col("rej_rate") * pl.col("tot_application").cast(pl.Float64))
          .filter(_RATED)
          .sum()
          .alias("_weighted_sum"),
        pl.col("tot_application").filter(_RATED).sum().alias("_rated_weight"),
    ]


def _weighted_mean_rej_rate() -> pl.Expr:
    return (
        pl.when(pl.col("_rated_weight") > 0)
          .then(pl.col("_weighted_sum") / pl.col("_rated_weight").cast(pl.Float64))
          .otherwise(pl.lit(None, dtype=pl.Float64))
          .alias("mean_rej_rate")
    )


def rank_countries(df: pl.DataFrame) -> pl.DataFrame:
    """
    Stage E: weighted mean rejection rate per consulate country, weights = tot_application.

    Sorted ascending (lowest rejection rate first), ties by country name.
    Countries with no rated record get a null mean and sort last.
    """
    ranking = (
        df
        .group_by("consulate_country", maintain_order=True)
        .agg([
            pl.col("tot_application").sum().alias("tot_application"),
            *_weighted_rate_parts(),
        ])
        .with_columns(_weighted_mean_rej_rate())
        .sort(["mean_rej_rate", "consulate_country"], nulls_last=True)
        .cast(COUNTRY_RANKING_SCHEMA)
        .select(list(COUNTRY_RANKING_SCHEMA.keys()))
    )
    return ranking


def country_order(df: pl.DataFrame) -> list[str]:
    """Presentation order of consulate countries, lowest weighted rejection rate first."""
    return rank_countries(df)["consulate_country"].to_list()


def summarize_by_continent(df: pl.DataFrame) -> pl.DataFrame:
    """
    Aggregate enriched visa records to continent level,
    producing a DataFrame matching CONTINENT_SUMMARY_SCHEMA.
    """
    summary = (
        df
        .group_by("continent", maintain_order=True)
        .agg([
            pl.len().alias("n_consulates"),
            pl.col("tot_application").sum().alias("tot_application"),
            pl.col("not_issued").sum().alias("not_issued"),
            *_weighted_rate_parts(),
        ])
        .with_columns(_weighted_mean_rej_rate())
        .sort(["mean_rej_rate", "continent"], nulls_last=True)
        .cast(CONTINENT_SUMMARY_SCHEMA)
        .select(list(CONTINENT_SUMMARY_SCHEMA.keys()))
    )
    return summary


def rate_extremes(ranking: pl.DataFrame) -> pl.DataFrame:
    """Lowest and highest rated rows of a ranking; a single row if only one is rated."""
    rated = ranking.filter(pl.col("mean_rej_rate").is_not_null())
    if len(rated) <= 1:
        return rated
    return rated.head(1).vstack(rated.tail(1))
