"""
Fact Extractor - Numeric Facts from Text and Tables.

Scans each line of a document body and each cell of its tables for numeric
literals, normalizes them, and tags them with the metric and fiscal year
implied by the line or by the cell's header and row label.

Extraction never fails on content: literals that do not parse are dropped.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from docaudit.extraction.classifier import ClassificationRule, DEFAULT_RULES, classify
from docaudit.extraction.numbers import extract_amounts
from docaudit.extraction.schemas import (
    TABLE_FALLBACK_LABEL,
    TEXT_FALLBACK_LABEL,
    NumericFact,
    TableData,
)
from docaudit.utils.logger import TraceObserver, get_logger

logger = get_logger(__name__)


TableInput = TableData | Mapping[str, Any]


class FactExtractor:
    """
    Extract tagged numeric facts from a document's text and tables.

    Usage:
        extractor = FactExtractor()
        facts = extractor.extract(text, tables)
    """

    def __init__(
        self,
        custom_rules: list[ClassificationRule] | None = None,
        observer: TraceObserver | None = None,
    ) -> None:
        """
        Initialize the extractor.

        Args:
            custom_rules: Extra classification rules, tried after the defaults
            observer: Optional callback receiving trace events
        """
        self.rules = list(DEFAULT_RULES)
        if custom_rules:
            self.rules.extend(custom_rules)
        self.observer = observer

    def extract(
        self,
        text: str | None,
        tables: Iterable[TableInput] | None = None,
    ) -> list[NumericFact]:
        """
        Extract facts from text first, then from tables in order.

        Args:
            text: Flat document text
            tables: Tables as TableData or {"headers": [...], "rows": [[...]]}

        Returns:
            Facts in document order
        """
        facts = self.extract_from_text(text or "")
        facts.extend(self.extract_from_tables(tables or []))

        logger.debug(f"Extracted {len(facts)} facts")
        return facts

    def extract_from_text(self, text: str) -> list[NumericFact]:
        """
        Extract facts line by line.

        Args:
            text: Flat document text

        Returns:
            Facts located as "Line N"
        """
        facts: list[NumericFact] = []
        lines = text.split("\n")

        for line_index, line in enumerate(lines):
            amounts = extract_amounts(line)
            if not amounts:
                continue

            tag = classify(line, self.rules)
            context = f"{tag.label(TEXT_FALLBACK_LABEL)}: {line.strip()}"
            location = f"Line {line_index + 1}"

            for _, value in amounts:
                facts.append(NumericFact(value=value, context=context, location=location))

        self._trace("text_scanned", lines=len(lines), facts=len(facts))
        return facts

    def extract_from_tables(self, tables: Iterable[TableInput]) -> list[NumericFact]:
        """
        Extract facts cell by cell from every table.

        Args:
            tables: Tables in document order

        Returns:
            Facts located as "Table T, <row label>, <header>"
        """
        facts: list[NumericFact] = []

        for table_index, raw_table in enumerate(tables):
            table = self._coerce_table(raw_table, table_index)
            if table is None:
                continue

            table_facts = self._extract_table(table, table_index)
            self._trace("table_scanned", table=table_index + 1, facts=len(table_facts))
            facts.extend(table_facts)

        return facts

    def _extract_table(self, table: TableData, table_index: int) -> list[NumericFact]:
        facts: list[NumericFact] = []

        for row_index, row in enumerate(table.rows):
            row_label = (row[0] if row else "") or f"Row {row_index + 1}"

            for cell_index, cell in enumerate(row):
                if not cell or not cell.strip():
                    continue

                amounts = extract_amounts(cell)
                if not amounts:
                    continue

                header = _header_at(table.headers, cell_index)
                tag = classify(f"{header} {row_label}", self.rules)
                context = f"{tag.label(TABLE_FALLBACK_LABEL)}: {row_label} - {header} ({cell})"
                location = f"Table {table_index + 1}, {row_label}, {header}"

                for _, value in amounts:
                    facts.append(NumericFact(value=value, context=context, location=location))

        return facts

    def _coerce_table(self, raw_table: TableInput, table_index: int) -> TableData | None:
        """Accept TableData or a plain mapping; skip anything else."""
        if isinstance(raw_table, TableData):
            return raw_table
        try:
            return TableData.model_validate(raw_table)
        except ValidationError as e:
            logger.debug(f"Skipping malformed table {table_index + 1}: {e.error_count()} errors")
            self._trace("table_skipped", table=table_index + 1, reason="invalid shape")
            return None

    def _trace(self, event: str, **payload: Any) -> None:
        if self.observer is not None:
            self.observer(event, payload)


def _header_at(headers: Sequence[str], index: int) -> str:
    if index < len(headers) and headers[index]:
        return headers[index]
    return f"Column {index + 1}"


def extract_facts(
    text: str | None,
    tables: Iterable[TableInput] | None = None,
    observer: TraceObserver | None = None,
) -> list[NumericFact]:
    """
    Convenience function to extract facts with the default rules.

    Args:
        text: Flat document text
        tables: Document tables
        observer: Optional trace callback

    Returns:
        Facts in document order
    """
    return FactExtractor(observer=observer).extract(text, tables)
