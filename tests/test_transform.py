"""
tests/test_transform.py

Weighted country ranking and continent summary. Records with no applications
must never carry weight in a mean nor trigger a division by zero.
"""

from __future__ import annotations

import polars as pl
import pytest

from src.contracts.schemas import CONTINENT_SUMMARY_SCHEMA, COUNTRY_RANKING_SCHEMA, UNCLASSIFIED_CONTINENT
from src.pipeline.clean import derive_rates
from src.pipeline.transform import country_order, rank_countries, rate_extremes, summarize_by_continent
from tests.helpers import make_records


def _rated(rows: list[tuple]) -> pl.DataFrame:
    return derive_rates(make_records(rows))


# ---------------------------------------------------------------------------
# Stage E: country ranking
# ---------------------------------------------------------------------------


class TestRankCountries:
    def test_zero_weight_record_is_excluded(self) -> None:
        records = _rated([
            ("France", "A", "a1", 90, 10),
            ("France", "A", "a2", 0, 0),
            ("France", "B", "b1", 25, 25),
        ])
        ranking = rank_countries(records)
        rates = dict(zip(ranking["consulate_country"], ranking["mean_rej_rate"]))
        assert rates["A"] == 0.1
        assert rates["B"] == 0.5
        assert ranking["consulate_country"].to_list() == ["A", "B"]

    def test_weighted_by_application_volume(self) -> None:
        records = _rated([
            ("France", "Algeria", "Algiers", 900, 100),   # 10% of 1000
            ("Spain", "Algeria", "Oran", 50, 50),         # 50% of 100
        ])
        ranking = rank_countries(records)
        assert ranking["mean_rej_rate"][0] == pytest.approx(150 / 1100)

    def test_ascending_order(self) -> None:
        records = _rated([
            ("France", "Nigeria", "Lagos", 55, 45),
            ("France", "China", "Beijing", 97, 3),
            ("France", "Morocco", "Rabat", 77, 23),
        ])
        assert country_order(records) == ["China", "Morocco", "Nigeria"]

    def test_ties_broken_by_country_name(self) -> None:
        records = _rated([
            ("France", "Peru", "Lima", 9, 1),
            ("France", "Chile", "Santiago", 9, 1),
        ])
        assert country_order(records) == ["Chile", "Peru"]

    def test_country_without_rated_records_sorts_last(self) -> None:
        records = _rated([
            ("France", "Bhutan", "Thimphu", 0, 0),
            ("France", "Nepal", "Kathmandu", 8, 2),
        ])
        ranking = rank_countries(records)
        assert ranking["consulate_country"].to_list() == ["Nepal", "Bhutan"]
        assert ranking["mean_rej_rate"][1] is None
        assert ranking["tot_application"][1] == 0

    def test_total_applications_include_all_records(self) -> None:
        records = _rated([
            ("France", "Senegal", "Dakar", 80, 20),
            ("Spain", "Senegal", "Dakar", 0, 0),
        ])
        assert rank_countries(records)["tot_application"].to_list() == [100]

    def test_matches_schema(self) -> None:
        ranking = rank_countries(_rated([("France", "Senegal", "Dakar", 80, 20)]))
        assert dict(ranking.schema) == COUNTRY_RANKING_SCHEMA

    def test_deterministic(self) -> None:
        records = _rated([
            ("France", "Senegal", "Dakar", 80, 20),
            ("Spain", "Algeria", "Oran", 70, 30),
            ("Italy", "Senegal", "Dakar", 33, 17),
        ])
        assert rank_countries(records).equals(rank_countries(records))


# ---------------------------------------------------------------------------
# Continent summary
# ---------------------------------------------------------------------------


class TestSummarizeByContinent:
    @pytest.fixture()
    def records(self) -> pl.DataFrame:
        return _rated([
            ("France", "Senegal", "Dakar", 80, 20),
            ("Spain", "Algeria", "Oran", 60, 40),
            ("Italy", "Algeria", "Algiers", 0, 0),
            ("France", "China", "Beijing", 95, 5),
            ("France", "Atlantis", "Poseidonia", 1, 1),
        ]).with_columns(
            pl.Series("continent", ["Africa", "Africa", "Africa", "Asia", UNCLASSIFIED_CONTINENT])
        )

    def test_accounts_for_every_record(self, records: pl.DataFrame) -> None:
        summary = summarize_by_continent(records)
        assert summary["n_consulates"].sum() == records.height
        assert UNCLASSIFIED_CONTINENT in summary["continent"].to_list()

    def test_weighted_mean_excludes_zero_weight(self, records: pl.DataFrame) -> None:
        summary = summarize_by_continent(records)
        africa = summary.filter(pl.col("continent") == "Africa").row(0, named=True)
        assert africa["n_consulates"] == 3
        assert africa["tot_application"] == 200
        assert africa["not_issued"] == 60
        assert africa["mean_rej_rate"] == pytest.approx(0.3)

    def test_sorted_ascending(self, records: pl.DataFrame) -> None:
        summary = summarize_by_continent(records)
        assert summary["continent"].to_list() == ["Asia", "Africa", UNCLASSIFIED_CONTINENT]

    def test_matches_schema(self, records: pl.DataFrame) -> None:
        assert dict(summarize_by_continent(records).schema) == CONTINENT_SUMMARY_SCHEMA


# ---------------------------------------------------------------------------
# Lowest / highest rated countries
# ---------------------------------------------------------------------------


class TestRateExtremes:
    def test_lowest_and_highest(self) -> None:
        ranking = rank_countries(_rated([
            ("France", "Nigeria", "Lagos", 55, 45),
            ("France", "China", "Beijing", 97, 3),
            ("France", "Morocco", "Rabat", 77, 23),
        ]))
        assert rate_extremes(ranking)["consulate_country"].to_list() == ["China", "Nigeria"]

    def test_single_rated_country_listed_once(self) -> None:
        ranking = rank_countries(_rated([
            ("France", "Nepal", "Kathmandu", 8, 2),
            ("France", "Bhutan", "Thimphu", 0, 0),
        ]))
        assert rate_extremes(ranking)["consulate_country"].to_list() == ["Nepal"]

    def test_no_rated_country(self) -> None:
        ranking = rank_countries(_rated([("France", "Bhutan", "Thimphu", 0, 0)]))
        assert rate_extremes(ranking).height == 0
