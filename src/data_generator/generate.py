"""
Synthetic Consulate Spreadsheet Generator

Generates a consulate-level visa statistics table shaped like the published
Schengen spreadsheet (human-readable headers, one row per Schengen state x consulate),
with the data-quality gaps the pipeline has to absorb:
  1. Per-state subtotal rows with no consulate country
  2. Blank issued / not-issued cells
  3. Consulates that reported no activity at all
  4. Country spellings the ISO registry cannot resolve

Usage:
    python -m src.data_generator.generate
"""

from pathlib import Path

import numpy as np
import polars as pl

from src.contracts.schemas import RAW_HEADERS, SAMPLE_INPUT_PATH

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
SEED = 42

SCHENGEN_STATES = [
    "Austria", "Belgium", "Czech Republic", "Denmark", "Finland", "France",
    "Germany", "Greece", "Italy", "Netherlands", "Poland", "Spain", "Sweden",
]

# Consulate country -> (cities, baseline rejection rate)
CONSULATE_COUNTRIES = {
    "Algeria": (["Algiers", "Oran"], 0.36),
    "Senegal": (["Dakar"], 0.32),
    "Nigeria": (["Abuja", "Lagos"], 0.45),
    "Morocco": (["Rabat", "Casablanca", "Tangier"], 0.23),
    "Egypt": (["Cairo"], 0.14),
    "Russian Federation": (["Moscow", "St Petersburg"], 0.01),
    "Turkey": (["Ankara", "Istanbul"], 0.08),
    "China": (["Beijing", "Shanghai", "Guangzhou"], 0.03),
    "India": (["New Delhi", "Mumbai"], 0.07),
    "Iran": (["Tehran"], 0.29),
    "Indonesia": (["Jakarta"], 0.04),
    "United Arab Emirates": (["Abu Dhabi", "Dubai"], 0.05),
    "Colombia": (["Bogota"], 0.12),
    "Bolivia": (["La Paz"], 0.10),
    "Kosovo": (["Pristina"], 0.33),
    "Congo (Democratic Republic)": (["Kinshasa"], 0.40),
    "Unknown territory": (["Unknown"], 0.20),
}

SUBTOTAL_LABEL = "Total"

# Rates of injected gaps
P_CONSULATE = 0.45        # chance a state runs a consulate in a given country
P_BLANK_COUNT = 0.05
P_NO_ACTIVITY = 0.03


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

def _consulate_row(
    rng: np.random.Generator,
    state: str,
    country: str,
    city: str,
    base_rate: float,
) -> dict:
    if rng.random() < P_NO_ACTIVITY:
        issued, not_issued = 0, 0
    else:
        applied = int(rng.lognormal(mean=7.5, sigma=1.2)) + 1
        rate = float(np.clip(rng.normal(base_rate, 0.04), 0.0, 1.0))
        not_issued = int(rng.binomial(applied, rate))
        issued = applied - not_issued

    applied_for = issued + not_issued
    row = {
        "schengen_state": state,
        "country_where_consulate_is_located": country,
        "consulate": city,
        "uniform_visas_applied_for": applied_for,
        "total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs": issued,
        "total_atvs_and_uniform_visas_not_issued": not_issued,
        "not_issued_rate_for_atvs_and_uniform_visas": (
            f"{not_issued / applied_for:.1%}" if applied_for else None
        ),
    }
    if rng.random() < P_BLANK_COUNT:
        row["total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs"] = None
    if rng.random() < P_BLANK_COUNT:
        row["total_atvs_and_uniform_visas_not_issued"] = None
    return row


def _subtotal_row(state: str, rows: list[dict]) -> dict:
    issued_key = "total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs"
    not_issued_key = "total_atvs_and_uniform_visas_not_issued"
    issued = sum(r[issued_key] or 0 for r in rows)
    not_issued = sum(r[not_issued_key] or 0 for r in rows)
    return {
        "schengen_state": f"{state} {SUBTOTAL_LABEL}",
        "country_where_consulate_is_located": None,
        "consulate": None,
        "uniform_visas_applied_for": issued + not_issued,
        issued_key: issued,
        not_issued_key: not_issued,
        "not_issued_rate_for_atvs_and_uniform_visas": None,
    }


def generate_consulate_table(seed: int = SEED) -> pl.DataFrame:
    """Return a raw consulate table with human-readable headers."""
    rng = np.random.default_rng(seed=seed)
    records = []

    for state in SCHENGEN_STATES:
        state_rows = []
        for country, (cities, base_rate) in CONSULATE_COUNTRIES.items():
            if rng.random() >= P_CONSULATE:
                continue
            for city in cities:
                state_rows.append(_consulate_row(rng, state, country, city, base_rate))
        records.extend(state_rows)
        records.append(_subtotal_row(state, state_rows))

    headers = {
        **RAW_HEADERS,
        "uniform_visas_applied_for": "Uniform visas applied for",
        "not_issued_rate_for_atvs_and_uniform_visas": "Not issued rate for ATVs and uniform visas",
    }
    schema = {
        "schengen_state": pl.Utf8,
        "country_where_consulate_is_located": pl.Utf8,
        "consulate": pl.Utf8,
        "uniform_visas_applied_for": pl.Int64,
        "total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs": pl.Int64,
        "total_atvs_and_uniform_visas_not_issued": pl.Int64,
        "not_issued_rate_for_atvs_and_uniform_visas": pl.Utf8,
    }
    df = pl.DataFrame(records, schema=schema)
    return df.rename(headers)


# ---------------------------------------------------------------------------
# Summary statistics
# ---------------------------------------------------------------------------

def print_summary(df: pl.DataFrame) -> None:
    country_col = RAW_HEADERS["country_where_consulate_is_located"]
    issued_col = RAW_HEADERS["total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs"]
    not_issued_col = RAW_HEADERS["total_atvs_and_uniform_visas_not_issued"]

    print("\n" + "=" * 60)
    print("DATA GENERATOR SUMMARY")
    print("=" * 60)
    print(f"Total rows: {len(df):,}")
    print(f"  Rows without consulate country: {df[country_col].null_count():,}")
    print(f"  Blank issued cells:             {df[issued_col].null_count():,}")
    print(f"  Blank not-issued cells:         {df[not_issued_col].null_count():,}")

    print("\n--- Consulates per country ---")
    per_country = (
        df.filter(pl.col(country_col).is_not_null())
        .group_by(country_col)
        .agg(pl.len().alias("consulates"))
        .sort(country_col)
    )
    for row in per_country.iter_rows(named=True):
        print(f"  {row[country_col]:<30} {row['consulates']:>4}")
    print("=" * 60)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(output_path: str = SAMPLE_INPUT_PATH) -> None:
    print("Generating synthetic consulate statistics...")
    df = generate_consulate_table()

    print_summary(df)

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    df.write_csv(output_path)
    print(f"\nSaved {len(df):,} rows -> {output_path}")


if __name__ == "__main__":
    main()
