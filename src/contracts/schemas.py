"""
Data contracts for the Schengen Visa Rejection-Rate Pipeline.

These schemas are the SINGLE SOURCE OF TRUTH for every stage.
Column names, dtypes, default paths and data-quality policy values live here.

Layer flow: raw spreadsheet -> visa records (cleaned + enriched) -> aggregates -> console report
"""

import polars as pl


# =============================================================================
# LAYER 1: Raw Spreadsheet (consulate statistics -> data/raw/)
# =============================================================================

# Normalized source header -> VisaRecord column.
# Headers are normalized by ingest.normalize_column_name before this lookup.
SOURCE_COLUMNS = {
    "schengen_state": "schengen_state",
    "country_where_consulate_is_located": "consulate_country",
    "consulate": "consulate_city",
    "total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs": "issued",
    "total_atvs_and_uniform_visas_not_issued": "not_issued",
}

# Human-readable headers as they appear in the published spreadsheet.
RAW_HEADERS = {
    "schengen_state": "Schengen State",
    "country_where_consulate_is_located": "Country where consulate is located",
    "consulate": "Consulate",
    "total_atvs_and_uniform_visas_issued_including_multiple_atvs_mevs_and_ltvs":
        "Total ATVs and uniform visas issued (including multiple ATVs, MEVs and LTVs)",
    "total_atvs_and_uniform_visas_not_issued": "Total ATVs and uniform visas not issued",
}

RAW_INPUT_PATH = "data/raw/consulates.xlsx"
SAMPLE_INPUT_PATH = "data/raw/consulates_sample.csv"

# Cell markers treated as missing when reading CSV exports
NULL_MARKERS = ["", "NA", "N/A", "n/a", "-"]


# =============================================================================
# LAYER 2: Visa Records (Pipeline -> data/processed/)
# =============================================================================

# Columns produced by Stage A (select + rename)
SELECTED_SCHEMA = {
    "schengen_state": pl.Utf8,
    "consulate_country": pl.Utf8,          # required; rows without it are dropped
    "consulate_city": pl.Utf8,
    "issued": pl.Int64,                    # null -> 0
    "not_issued": pl.Int64,                # null -> 0
}

# One row per (schengen state, consulate) after all stages
VISA_RECORD_SCHEMA = {
    **SELECTED_SCHEMA,
    "tot_application": pl.Int64,           # issued + not_issued
    "rej_rate": pl.Float64,                # 0.0 - 1.0, null when tot_application == 0
    "continent": pl.Utf8,                  # continent name or UNCLASSIFIED_CONTINENT
}

VISA_RECORDS_OUTPUT_PATH = "data/processed/visa_records.parquet"


# =============================================================================
# LAYER 3: Aggregates (computed on demand, not persisted)
# =============================================================================

# Presentation ordering: lowest weighted rejection rate first
COUNTRY_RANKING_SCHEMA = {
    "consulate_country": pl.Utf8,
    "tot_application": pl.Int64,
    "mean_rej_rate": pl.Float64,           # weighted by tot_application, null if no rated records
}

CONTINENT_SUMMARY_SCHEMA = {
    "continent": pl.Utf8,
    "n_consulates": pl.Int64,
    "tot_application": pl.Int64,
    "not_issued": pl.Int64,
    "mean_rej_rate": pl.Float64,
}


# =============================================================================
# DATA-QUALITY POLICIES
# =============================================================================

# A blank count cell means "no activity reported", not "unknown".
# Only the columns listed here are defaulted.
COUNT_DEFAULTS = {"issued": 0, "not_issued": 0}

# Continent assigned when the classifier cannot resolve a country name
UNCLASSIFIED_CONTINENT = "unclassified"

# Spreadsheet spellings the ISO registry does not resolve on its own.
# Lower-cased name -> continent name.
CONTINENT_ALIASES = {
    "kosovo": "Europe",
    "congo (democratic republic)": "Africa",
    "democratic republic of the congo": "Africa",
    "congo (brazzaville)": "Africa",
    "ivory coast": "Africa",
    "cape verde": "Africa",
    "swaziland": "Africa",
    "east timor": "Asia",
    "burma": "Asia",
    "macedonia": "Europe",
    "fyrom": "Europe",
    "vatican": "Europe",
    "palestine": "Asia",
    "palestinian authority": "Asia",
    "taiwan": "Asia",
    "turkey": "Asia",
    "holy see": "Europe",
    "timor-leste": "Asia",
    "korea (south)": "Asia",
    "korea, south": "Asia",
    "south korea": "Asia",
    "korea (north)": "Asia",
    "korea, north": "Asia",
    "north korea": "Asia",
    "hong kong s.a.r.": "Asia",
    "macao s.a.r.": "Asia",
    "macau s.a.r.": "Asia",
}

# ISO alpha-2 codes pycountry-convert has no continent for.
CONTINENT_BY_ALPHA_2 = {
    "VA": "Europe",
    "TL": "Asia",
    "SX": "North America",
    "EH": "Africa",
    "PN": "Oceania",
    "UM": "Oceania",
    "TF": "Antarctica",
    "AQ": "Antarctica",
}
