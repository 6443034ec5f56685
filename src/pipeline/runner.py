"""
Compose the rejection-rate stages into one DataFrame -> DataFrame pass.
"""

from typing import Optional

import polars as pl

from src.contracts.schemas import SOURCE_COLUMNS, VISA_RECORD_SCHEMA
from src.pipeline.clean import derive_rates, drop_missing_country, fill_missing_counts
from src.pipeline.enrich import ContinentClassifier, add_continent
from src.pipeline.ingest import select_visa_columns


def run_pipeline(
    raw: pl.DataFrame,
    classifier: Optional[ContinentClassifier] = None,
    columns: dict[str, str] = SOURCE_COLUMNS,
) -> pl.DataFrame:
    """
    Turn a raw consulate table (normalized headers) into visa records
    matching VISA_RECORD_SCHEMA, in source row order.

    Stages: select -> drop missing country -> default counts -> derive rates -> continent.
    Only SchemaError escapes; data-quality gaps are absorbed by the named policies.
    """
    records = select_visa_columns(raw, columns)
    records = drop_missing_country(records)
    records = fill_missing_counts(records)
    records = derive_rates(records)
    records = add_continent(records, classifier)
    return records.cast(VISA_RECORD_SCHEMA).select(list(VISA_RECORD_SCHEMA.keys()))
