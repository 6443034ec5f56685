"""
CLI entrypoint: python -m src.pipeline
Runs ingestion, cleaning, rate derivation and continent enrichment,
then writes the visa record table.
"""

from pathlib import Path

import polars as pl

from src.contracts.schemas import RAW_INPUT_PATH, UNCLASSIFIED_CONTINENT, VISA_RECORDS_OUTPUT_PATH
from src.pipeline.ingest import load_raw_visa_table
from src.pipeline.runner import run_pipeline
from src.pipeline.transform import rank_countries, rate_extremes


def main(input_path: str = RAW_INPUT_PATH, output_path: str = VISA_RECORDS_OUTPUT_PATH) -> pl.DataFrame:
    print("[pipeline] Starting Schengen Visa Rejection-Rate Pipeline")

    # Step 1: Ingest
    print("[pipeline] Step 1/3 — Loading raw consulate table...")
    raw = load_raw_visa_table(input_path, fallback_to_mock=True)
    print(f"  Loaded {len(raw):,} rows x {len(raw.columns)} columns")

    # Step 2: Clean, derive, enrich
    print("[pipeline] Step 2/3 — Cleaning and deriving rejection rates...")
    records = run_pipeline(raw)
    dropped = len(raw) - len(records)
    unrated = records["rej_rate"].null_count()
    unclassified = records.filter(pl.col("continent") == UNCLASSIFIED_CONTINENT).height
    print(f"  {len(records):,} visa records | {dropped:,} dropped (no consulate country)")
    print(f"  {unrated:,} records without applications | {unclassified:,} with unclassified continent")

    # Step 3: Country ordering
    print("[pipeline] Step 3/3 — Ranking consulate countries...")
    ranking = rank_countries(records)
    print(f"  {len(ranking)} consulate countries")

    # Write output
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    records.write_parquet(output_path)

    total = records["tot_application"].sum()
    refused = records["not_issued"].sum()
    overall_rate = refused / total if total > 0 else 0.0

    print(f"\n[pipeline] Done.")
    print(f"  visa records -> {output_path}")
    print(f"\nSummary:")
    print(f"  Applications   : {total:,}")
    print(f"  Rejection rate : {overall_rate:.1%}")

    # Lowest and highest rejection countries for a quick sanity check
    extremes = rate_extremes(ranking)
    if len(extremes):
        print("\nLowest / highest weighted rejection rate:")
        for row in extremes.iter_rows(named=True):
            print(f"  {row['consulate_country']}: {row['mean_rej_rate']:.1%}"
                  f" over {row['tot_application']:,} applications")
    return records


if __name__ == "__main__":
    main()
