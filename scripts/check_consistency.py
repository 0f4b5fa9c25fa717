#!/usr/bin/env python3
"""
CLI Script for Cross-Document Consistency Checks.

Usage:
    python scripts/check_consistency.py report.csv board_deck.txt
    python scripts/check_consistency.py report.csv deck.md --tolerance 0.01 --show-facts
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()


def run_check(
    paths: list[Path],
    tolerance: float,
    show_facts: bool,
) -> int:
    """Load documents, extract facts and print the inconsistency report."""
    from docaudit.ingestion.loader import DocumentLoaderError, load_document
    from docaudit.matching.matcher import format_value
    from docaudit.session import AnalysisSession

    session = AnalysisSession(tolerance=tolerance)

    console.print("\n[bold blue]Extracting facts...[/]")

    for path in paths:
        try:
            document = load_document(path)
        except DocumentLoaderError as e:
            console.print(f"[red]Skipping {path}: {e}[/]")
            continue

        fact_set = session.add_processed(document)
        console.print(f"  {fact_set.name}: {fact_set.fact_count} facts")

        if show_facts and fact_set.facts:
            facts_table = Table(title=fact_set.name, show_header=True, header_style="bold")
            facts_table.add_column("Location", width=24)
            facts_table.add_column("Value", justify="right", width=16)
            facts_table.add_column("Context", width=60)
            for fact in fact_set.facts:
                facts_table.add_row(fact.location, format_value(fact.value), fact.context[:60])
            console.print(facts_table)

    if len(session.documents) < 2:
        console.print("[red]Error: At least 2 readable documents required for comparison[/]")
        return 1

    console.print(f"\n[bold blue]Cross-referencing {len(session.documents)} documents...[/]")
    report = session.analyze()

    # Display results
    console.print(f"\n[bold green]" + "=" * 60 + "[/]")
    console.print(f"[bold green]CONSISTENCY REPORT[/]")
    console.print(f"[bold green]" + "=" * 60 + "[/]")

    console.print(f"\n{report.to_summary()}")

    if not report.has_inconsistencies:
        console.print("\n[green]✓ All shared metrics agree across documents.[/]")
        return 0

    table = Table(title="Inconsistencies", show_header=True, header_style="bold red")
    table.add_column("#", style="dim", width=3)
    table.add_column("Field", width=24)
    table.add_column("Type", width=18)
    table.add_column("Documents", width=40)

    for i, item in enumerate(report.inconsistencies, 1):
        table.add_row(
            str(i),
            item.field_name[:24],
            item.validation_type.replace("_", " ").title(),
            ", ".join(item.document_names)[:40],
        )

    console.print(table)

    console.print("\n[bold]Detailed Findings:[/]\n")

    for i, item in enumerate(report.inconsistencies, 1):
        lines = "\n".join(
            f"  {v.document_name} ({v.location}): {format_value(v.value)}"
            for v in item.values
        )
        console.print(Panel(
            f"[bold]{item.error_message}[/]\n\n{lines}",
            title=f"[red]Inconsistency #{i}[/]",
            border_style="red" if item.validation_type == "cross_reference" else "yellow",
        ))

    console.print("\n[dim]Report complete.[/]")
    return 2


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Flag numeric metrics reported with different values across documents"
    )
    parser.add_argument(
        "files",
        type=Path,
        nargs="+",
        help="Documents to compare (.txt, .md, .csv)",
    )
    parser.add_argument(
        "--tolerance", "-t",
        type=float,
        default=0.0,
        help="Relative difference treated as equal, e.g. 0.01 for 1%% (default: 0)",
    )
    parser.add_argument(
        "--show-facts",
        action="store_true",
        help="Print every extracted fact",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()

    from docaudit.utils.logger import setup_logging

    setup_logging(args.log_level)

    console.print("[bold]Document Consistency Checker[/]")
    console.print("=" * 50)
    console.print(f"Documents to compare: {len(args.files)}")

    if len(args.files) < 2:
        console.print("[red]Error: At least 2 documents required for comparison[/]")
        sys.exit(1)

    if args.tolerance < 0:
        console.print("[red]Error: --tolerance must be >= 0[/]")
        sys.exit(1)

    sys.exit(run_check(args.files, args.tolerance, args.show_facts))


if __name__ == "__main__":
    main()
