"""
Command-line interface for receipt/invoice record extraction.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, List

import typer

from receipt_records import pipeline
from receipt_records.config import load_settings

app = typer.Typer()

logger = logging.getLogger(__name__)


def _find_documents(doc_dir: Path, allowed: FrozenSet[str]) -> List[Path]:
    """Find all supported documents in the given directory."""
    return sorted(
        p for p in doc_dir.iterdir()
        if p.is_file() and p.suffix.lstrip(".").lower() in allowed
    )


def _print_summary(records: Dict[str, List[Dict[str, Any]]]):
    """Print human-readable summary to stdout."""
    print(f"\n{'='*60}")
    print("Summary")
    print(f"{'='*60}")
    print(f"Invoices: {len(records['invoices'])}")
    print(f"Products: {len(records['products'])}")
    print(f"Customers: {len(records['customers'])}")
    print(f"{'='*60}\n")


def _write_json(data: Any, output_path: Path):
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """
    Extract invoice, product and customer records from receipts.
    """
    level = "DEBUG" if verbose else load_settings().log_level
    logging.basicConfig(level=level)


@app.command()
def parse(
    input: str = typer.Option(..., "--input", help="Text file with a raw model answer"),
    output: str = typer.Option(..., "--output", help="Output JSON file path")
):
    """
    Sanitize a saved model answer and project it into records.
    """
    input_path = Path(input)

    if not input_path.exists():
        typer.echo(f"Error: Input file '{input}' does not exist", err=True)
        raise typer.Exit(code=1)

    raw_text = input_path.read_text(encoding='utf-8')
    records = pipeline.extract_records(raw_text).to_dict()

    _write_json(records, Path(output))
    typer.echo(f"Output written to: {output}")
    _print_summary(records)


@app.command()
def extract(
    doc_dir: str = typer.Option(..., "--doc-dir", help="Directory containing receipts or invoices"),
    output: str = typer.Option(..., "--output", help="Output JSON file path")
):
    """
    Send every document in a directory to Gemini and collect the records.
    """
    doc_dir_path = Path(doc_dir)

    if not doc_dir_path.exists():
        typer.echo(f"Error: Directory '{doc_dir}' does not exist", err=True)
        raise typer.Exit(code=1)

    if not doc_dir_path.is_dir():
        typer.echo(f"Error: '{doc_dir}' is not a directory", err=True)
        raise typer.Exit(code=1)

    documents = _find_documents(doc_dir_path, load_settings().allowed_extensions)
    records: Dict[str, List[Dict[str, Any]]] = {'invoices': [], 'products': [], 'customers': []}

    if not documents:
        typer.echo(f"Warning: No supported documents found in '{doc_dir}'", err=True)
    else:
        typer.echo(f"Found {len(documents)} document(s). Extracting...")

    for doc_path in documents:
        try:
            typer.echo(f"Processing: {doc_path.name}")
            result = pipeline.process_document(str(doc_path))
        except Exception as e:
            logger.exception(f"Error extracting {doc_path.name}")
            typer.echo(f"Error extracting {doc_path.name}: {e}", err=True)
            continue

        for key, rows in result.to_dict().items():
            records[key].extend(rows)

    if not any(records.values()):
        typer.echo("No records extracted. Exiting.", err=True)
        raise typer.Exit(code=1)

    _write_json(records, Path(output))
    typer.echo(f"\nOutput written to: {output}")
    _print_summary(records)


if __name__ == "__main__":
    app()
