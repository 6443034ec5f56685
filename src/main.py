"""
Schengen Visa Rejection-Rate Pipeline — CLI Entrypoint.

Usage:
    python -m src.main generate    # Generate a synthetic consulate spreadsheet
    python -m src.main pipeline    # Clean, derive rates, enrich with continents
    python -m src.main analyze     # Print country and continent rejection-rate tables
    python -m src.main run-all     # Full end-to-end run on the synthetic spreadsheet
"""

import click
from rich.console import Console

from src.contracts.schemas import RAW_INPUT_PATH, SAMPLE_INPUT_PATH, VISA_RECORDS_OUTPUT_PATH

console = Console()


@click.group()
def cli():
    """Schengen Visa Rejection-Rate Pipeline."""
    pass


@cli.command()
@click.option("--output", "output_path", default=SAMPLE_INPUT_PATH, show_default=True,
              help="Where to write the synthetic CSV.")
def generate(output_path):
    """Generate a synthetic consulate spreadsheet."""
    console.rule("[bold]Step 1: Data Generation[/bold]")
    from src.data_generator.generate import main
    main(output_path)
    console.print("[green]Data generation complete.[/green]\n")


@cli.command()
@click.option("--input", "input_path", default=RAW_INPUT_PATH, show_default=True,
              help="Raw spreadsheet (.xlsx, .csv or .parquet).")
@click.option("--output", "output_path", default=VISA_RECORDS_OUTPUT_PATH, show_default=True,
              help="Where to write the visa record table.")
def pipeline(input_path, output_path):
    """Clean the raw table, derive rejection rates and add continents."""
    console.rule("[bold]Step 2: Pipeline[/bold]")
    from src.pipeline.__main__ import main as pipeline_main
    from src.pipeline.ingest import SchemaError

    try:
        pipeline_main(input_path, output_path)
    except (SchemaError, FileNotFoundError, ValueError) as exc:
        console.print(f"[bold red]Pipeline aborted:[/bold red] {exc}")
        raise click.ClickException(str(exc)) from exc
    console.print("[green]Pipeline complete.[/green]\n")


@cli.command()
@click.option("--input", "input_path", default=VISA_RECORDS_OUTPUT_PATH, show_default=True,
              help="Visa record table written by the pipeline.")
def analyze(input_path):
    """Print country and continent rejection-rate tables."""
    console.rule("[bold]Step 3: Report[/bold]")
    from src.analytics.__main__ import main as analytics_main
    analytics_main(input_path)
    console.print("[green]Report complete.[/green]\n")


@cli.command(name="run-all")
def run_all():
    """Run the full pipeline end-to-end on the synthetic spreadsheet."""
    console.rule("[bold cyan]Schengen Visa Rejection-Rate Pipeline[/bold cyan]")
    console.print("Running full end-to-end pipeline...\n")

    generate.callback(output_path=SAMPLE_INPUT_PATH)
    pipeline.callback(input_path=SAMPLE_INPUT_PATH, output_path=VISA_RECORDS_OUTPUT_PATH)
    analyze.callback(input_path=VISA_RECORDS_OUTPUT_PATH)

    console.rule("[bold green]Pipeline Complete[/bold green]")
    console.print("\nOutputs:")
    console.print(f"  Raw sample:   {SAMPLE_INPUT_PATH}")
    console.print(f"  Visa records: {VISA_RECORDS_OUTPUT_PATH}")


if __name__ == "__main__":
    cli()
