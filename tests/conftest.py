"""
Pytest Configuration and Fixtures.

All fixtures use REAL components - no mocks.
"""

from pathlib import Path
from typing import Any

import pytest

from docaudit.extraction.fact_extractor import extract_facts
from docaudit.extraction.schemas import NumericFact, TableData
from docaudit.matching.schemas import DocumentFactSet


# ============================================================================
# Document Content Fixtures
# ============================================================================

@pytest.fixture
def annual_report_text() -> str:
    """Text of a small annual report."""
    return (
        "Annual Report FY2024\n"
        "2024 Revenue: $150,000\n"
        "Operating expenses were (12,500) for the year.\n"
        "Net profit 2024: 2.5 million\n"
        "\n"
        "Headcount grew to 3K employees."
    )


@pytest.fixture
def revenue_table() -> TableData:
    """A two-year revenue table."""
    return TableData(
        headers=["Metric", "2023", "2024"],
        rows=[
            ["Revenue", "140,000", "150,000"],
            ["Operating costs", "(60,000)", "(65,000)"],
        ],
    )


# ============================================================================
# Fact Set Fixtures
# ============================================================================

def make_fact_set(doc_id: str, name: str, text: str, tables: list[Any] | None = None) -> DocumentFactSet:
    """Build a DocumentFactSet straight from text."""
    return DocumentFactSet(id=doc_id, name=name, facts=extract_facts(text, tables or []))


@pytest.fixture
def spreadsheet_doc() -> DocumentFactSet:
    """Spreadsheet reporting 2024 revenue as 150,000."""
    return make_fact_set("doc-xlsx", "Financials.xlsx", "2024 Revenue: 150,000")


@pytest.fixture
def deck_doc() -> DocumentFactSet:
    """Board deck reporting 2024 revenue as 145,000."""
    return make_fact_set("doc-pdf", "Board Deck.pdf", "2024 Revenue: 145,000")


@pytest.fixture
def trace_events() -> list[tuple[str, dict[str, Any]]]:
    """Sink for observer events."""
    return []


@pytest.fixture
def observer(trace_events):
    """Observer appending every event to trace_events."""

    def observe(event: str, payload: dict[str, Any]) -> None:
        trace_events.append((event, payload))

    return observe


@pytest.fixture
def fact() -> NumericFact:
    """A single revenue fact."""
    return NumericFact(
        value=150000.0,
        context="revenue 2024: 2024 Revenue: 150,000",
        location="Line 1",
    )


# ============================================================================
# File Fixtures
# ============================================================================

@pytest.fixture
def csv_file(tmp_path: Path) -> Path:
    """CSV export of the revenue table."""
    path = tmp_path / "financials.csv"
    path.write_text(
        'Metric,2023,2024\n'
        'Revenue,"140,000","150,000"\n',
        encoding="utf-8",
    )
    return path


@pytest.fixture
def text_file(tmp_path: Path) -> Path:
    """Plain-text memo restating 2024 revenue."""
    path = tmp_path / "memo.txt"
    path.write_text("Memo\n2024 Revenue: 145,000\n", encoding="utf-8")
    return path
