"""
CLI entrypoint for the rejection-rate report.

Usage:
    python -m src.analytics
"""

from pathlib import Path

import polars as pl
from rich import box
from rich.console import Console
from rich.table import Table

from src.contracts.schemas import VISA_RECORDS_OUTPUT_PATH
from src.pipeline.transform import rank_countries, summarize_by_continent

console = Console()

# Rejection rate thresholds for color coding
RATE_GREEN_THRESHOLD = 0.10
RATE_YELLOW_THRESHOLD = 0.25


def _rate_color(rate: float) -> str:
    if rate < RATE_GREEN_THRESHOLD:
        return "green"
    if rate < RATE_YELLOW_THRESHOLD:
        return "yellow"
    return "red"


def _fmt_rate(rate) -> str:
    if rate is None:
        return "[dim]n/a[/dim]"
    color = _rate_color(rate)
    return f"[{color}]{rate:.1%}[/{color}]"


def load_visa_records(path: str = VISA_RECORDS_OUTPUT_PATH) -> tuple[pl.DataFrame, bool]:
    """Load visa records. Returns (dataframe, is_mock)."""
    if Path(path).exists():
        return pl.read_parquet(path), False

    from src.pipeline.ingest import load_raw_visa_table
    from src.pipeline.runner import run_pipeline

    console.print(f"[yellow]'{path}' not found — running the pipeline on mock data.[/yellow]")
    return run_pipeline(load_raw_visa_table(fallback_to_mock=True)), True


def country_table(ranking: pl.DataFrame) -> Table:
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold magenta", expand=True)
    table.add_column("#", style="bold", width=3, justify="right")
    table.add_column("Consulate country", style="bold")
    table.add_column("Applications", justify="right", width=14)
    table.add_column("Weighted rejection rate", justify="right", width=24)

    for rank, row in enumerate(ranking.iter_rows(named=True), start=1):
        table.add_row(
            str(rank),
            row["consulate_country"],
            f"{row['tot_application']:,}",
            _fmt_rate(row["mean_rej_rate"]),
        )
    return table


def continent_table(summary: pl.DataFrame) -> Table:
    table = Table(box=box.ROUNDED, show_header=True, header_style="bold magenta", expand=True)
    table.add_column("Continent", style="bold")
    table.add_column("Consulates", justify="right", width=12)
    table.add_column("Applications", justify="right", width=14)
    table.add_column("Refused", justify="right", width=12)
    table.add_column("Weighted rejection rate", justify="right", width=24)

    for row in summary.iter_rows(named=True):
        table.add_row(
            row["continent"],
            f"{row['n_consulates']:,}",
            f"{row['tot_application']:,}",
            f"{row['not_issued']:,}",
            _fmt_rate(row["mean_rej_rate"]),
        )
    return table


def main(input_path: str = VISA_RECORDS_OUTPUT_PATH) -> None:
    console.rule("[bold blue]Schengen Visas — Rejection Rates by Country and Continent")

    records, is_mock = load_visa_records(input_path)
    ranking = rank_countries(records)
    summary = summarize_by_continent(records)

    console.rule("[bold green]Consulate countries (lowest rejection rate first)")
    console.print(country_table(ranking))

    console.rule("[bold green]Continents")
    console.print(continent_table(summary))

    console.rule()
    if is_mock:
        console.print("[dim]NOTE: report built from mock data — run the pipeline on a real spreadsheet first.[/dim]")
    console.print(f"[dim]{len(records):,} visa records from {input_path}[/dim]")


if __name__ == "__main__":
    main()
