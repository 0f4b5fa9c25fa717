"""
Tests for Fact Extractor.
"""

import math

import pytest
from pydantic import ValidationError

from docaudit.extraction.classifier import keyword_rule
from docaudit.extraction.fact_extractor import FactExtractor, extract_facts
from docaudit.extraction.schemas import MetricType, NumericFact, TableData


class TestNumericFact:
    """Tests for the NumericFact model."""

    def test_rejects_zero(self) -> None:
        """Test zero values cannot be facts."""
        with pytest.raises(ValidationError):
            NumericFact(value=0.0, context="number: 0", location="Line 1")

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_rejects_non_finite(self, value) -> None:
        """Test inf and NaN cannot be facts."""
        with pytest.raises(ValidationError):
            NumericFact(value=value, context="number", location="Line 1")

    def test_frozen(self, fact) -> None:
        """Test facts are immutable."""
        with pytest.raises(ValidationError):
            fact.value = 1.0


class TestTextExtraction:
    """Tests for line-by-line text extraction."""

    def test_annual_report(self, annual_report_text) -> None:
        """Test every literal becomes a tagged, located fact."""
        facts = extract_facts(annual_report_text)

        assert [f.value for f in facts] == [
            2024.0,
            2024.0,
            150000.0,
            -12500.0,
            2024.0,
            2_500_000.0,
            3000.0,
        ]
        assert [f.location for f in facts] == [
            "Line 1",
            "Line 2",
            "Line 2",
            "Line 3",
            "Line 4",
            "Line 4",
            "Line 6",
        ]

    def test_context_carries_tag_and_line(self, annual_report_text) -> None:
        """Test context is '<label>: <trimmed line>'."""
        facts = extract_facts(annual_report_text)

        assert facts[0].context == "yearly_figure 2024: Annual Report FY2024"
        assert facts[2].context == "revenue 2024: 2024 Revenue: $150,000"
        assert facts[3].context == "expense: Operating expenses were (12,500) for the year."
        assert facts[5].context == "profit 2024: Net profit 2024: 2.5 million"
        assert facts[6].context == "number: Headcount grew to 3K employees."

    def test_empty_input(self) -> None:
        """Test empty and missing text produce no facts."""
        assert extract_facts("") == []
        assert extract_facts(None) == []

    def test_lines_without_numbers(self) -> None:
        """Test prose-only text produces no facts."""
        assert extract_facts("Revenue grew strongly.\nCosts fell.") == []

    def test_idempotent(self, annual_report_text, revenue_table) -> None:
        """Test repeated extraction gives identical results."""
        extractor = FactExtractor()

        first = extractor.extract(annual_report_text, [revenue_table])
        second = extractor.extract(annual_report_text, [revenue_table])

        assert first == second


class TestTableExtraction:
    """Tests for cell-by-cell table extraction."""

    def test_revenue_table(self, revenue_table) -> None:
        """Test cells are tagged from header and row label."""
        facts = extract_facts("", [revenue_table])

        assert [f.value for f in facts] == [140000.0, 150000.0, -60000.0, -65000.0]
        assert facts[0].context == "revenue 2023: Revenue - 2023 (140,000)"
        assert facts[0].location == "Table 1, Revenue, 2023"
        assert facts[1].context == "revenue 2024: Revenue - 2024 (150,000)"
        assert facts[2].context == "expense 2023: Operating costs - 2023 ((60,000))"

    def test_text_facts_come_first(self, revenue_table) -> None:
        """Test text facts precede table facts."""
        facts = extract_facts("Memo total: 5", [revenue_table])

        assert facts[0].value == 5.0
        assert facts[0].location == "Line 1"
        assert facts[1].location.startswith("Table 1")

    def test_mapping_tables(self) -> None:
        """Test plain dict tables are accepted."""
        table = {"headers": ["Item", "2024"], "rows": [["Revenue", 150000]]}

        facts = extract_facts("", [table])

        assert len(facts) == 1
        assert facts[0].value == 150000.0
        assert facts[0].context.startswith("revenue 2024:")

    def test_missing_headers_fall_back(self) -> None:
        """Test short header rows fall back to column numbers."""
        table = TableData(headers=["Item"], rows=[["Widgets", "12"]])

        facts = extract_facts("", [table])

        assert facts[0].location == "Table 1, Widgets, Column 2"
        assert facts[0].context == "table_value: Widgets - Column 2 (12)"

    def test_blank_row_label_falls_back(self) -> None:
        """Test rows without a label are named by position."""
        table = TableData(headers=["", "Q1"], rows=[["", "7"]])

        facts = extract_facts("", [table])

        assert facts[0].location == "Table 1, Row 1, Q1"

    def test_blank_cells_skipped(self) -> None:
        """Test empty and None cells produce nothing."""
        table = {"headers": ["Item", "2024"], "rows": [["Revenue", None], ["Sales", "  "]]}

        assert extract_facts("", [table]) == []

    def test_second_table_numbering(self, revenue_table) -> None:
        """Test tables are numbered from 1 in order."""
        other = TableData(headers=["Item", "2024"], rows=[["Total assets", "900"]])

        facts = extract_facts("", [revenue_table, other])

        assert facts[-1].location == "Table 2, Total assets, 2024"

    @pytest.mark.parametrize(
        "table",
        [
            {"headers": "Item", "rows": [["a", "1"]]},
            {"headers": ["Item"], "rows": "not rows"},
            {"headers": ["Item"], "rows": [42]},
            "not a table",
        ],
    )
    def test_malformed_tables_skipped(self, table, revenue_table) -> None:
        """Test tables with the wrong shape are skipped, not fatal."""
        facts = extract_facts("", [table, revenue_table])

        assert len(facts) == 4
        assert facts[0].location.startswith("Table 2")


class TestExtractorOptions:
    """Tests for custom rules and tracing."""

    def test_custom_rules_appended(self) -> None:
        """Test custom rules fire when no default rule does."""
        extractor = FactExtractor(custom_rules=[keyword_rule(MetricType.ASSET, "inventory")])

        facts = extractor.extract("Inventory: 400")

        assert facts[0].context == "asset: Inventory: 400"

    def test_defaults_keep_priority(self) -> None:
        """Test custom rules do not override default matches."""
        extractor = FactExtractor(custom_rules=[keyword_rule(MetricType.ASSET, "revenue")])

        facts = extractor.extract("Revenue: 400")

        assert facts[0].context.startswith("revenue:")

    def test_observer_events(self, observer, trace_events, revenue_table) -> None:
        """Test scans and skips are reported to the observer."""
        extract_facts("Revenue: 1\nCost: 2", [revenue_table, {"rows": 5}], observer=observer)

        events = [event for event, _ in trace_events]
        assert events == ["text_scanned", "table_scanned", "table_skipped"]

        _, text_payload = trace_events[0]
        assert text_payload == {"lines": 2, "facts": 2}

        _, table_payload = trace_events[1]
        assert table_payload == {"table": 1, "facts": 4}
