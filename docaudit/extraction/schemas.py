"""
Pydantic Schemas for Extraction Layer.

Numeric facts recovered from document text and tables, plus the metric
tag used to classify them.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MetricType(str, Enum):
    """Financial category inferred for a fact."""

    REVENUE = "revenue"
    EXPENSE = "expense"
    PROFIT = "profit"
    TOTAL = "total"
    ASSET = "asset"
    LIABILITY = "liability"
    UNKNOWN = "unknown"


# Tag label for a fact with a year but no metric keyword
YEARLY_FIGURE_LABEL = "yearly_figure"

# Tag labels for facts with neither metric nor year
TEXT_FALLBACK_LABEL = "number"
TABLE_FALLBACK_LABEL = "table_value"


@dataclass(frozen=True)
class MetricTag:
    """
    Classification of a fact's surrounding text.

    Derived on demand from context, never stored on the fact itself.
    """

    metric_type: MetricType = MetricType.UNKNOWN
    fiscal_year: int | None = None

    @property
    def has_metric(self) -> bool:
        return self.metric_type != MetricType.UNKNOWN

    @property
    def has_year(self) -> bool:
        return self.fiscal_year is not None

    def label(self, fallback: str = TEXT_FALLBACK_LABEL) -> str:
        """
        Render the tag as the prefix of a fact's context string.

        Args:
            fallback: Label used when neither metric nor year is known

        Returns:
            e.g. "revenue 2024", "expense", "yearly_figure 2023"
        """
        if self.has_metric and self.has_year:
            return f"{self.metric_type.value} {self.fiscal_year}"
        if self.has_metric:
            return self.metric_type.value
        if self.has_year:
            return f"{YEARLY_FIGURE_LABEL} {self.fiscal_year}"
        return fallback

    @classmethod
    def from_label(cls, label: str) -> "MetricTag | None":
        """
        Read a tag back from a label produced by label().

        Args:
            label: e.g. "revenue 2024", "yearly_figure 2023", "table_value"

        Returns:
            MetricTag, or None if the text is not a tag label
        """
        head, _, year_text = label.partition(" ")
        year: int | None = None
        if year_text:
            if len(year_text) != 4 or not year_text.isdigit():
                return None
            year = int(year_text)

        if head == YEARLY_FIGURE_LABEL:
            return cls(fiscal_year=year) if year is not None else None
        if head in (TEXT_FALLBACK_LABEL, TABLE_FALLBACK_LABEL):
            return cls() if year is None else None

        try:
            metric_type = MetricType(head)
        except ValueError:
            return None
        if metric_type == MetricType.UNKNOWN:
            return None
        return cls(metric_type=metric_type, fiscal_year=year)


class NumericFact(BaseModel):
    """
    One numeric value recovered from a document.

    Zero and non-finite values are rejected at construction.
    """

    model_config = ConfigDict(frozen=True)

    value: float = Field(..., description="Signed, scale-expanded value")
    context: str = Field(..., description="Tag label plus the source line or cell excerpt")
    location: str = Field(..., description="Line number or table/row/column coordinates")

    @field_validator("value")
    @classmethod
    def _check_value(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("fact value must be finite")
        if value == 0:
            raise ValueError("fact value must be non-zero")
        return value


class TableData(BaseModel):
    """A simple two-dimensional table handed over by a document decoder."""

    headers: list[str] = Field(default_factory=list, description="Column headers")
    rows: list[list[str]] = Field(default_factory=list, description="Rows; first cell is the label")

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Any) -> list[str]:
        return [_cell_text(cell) for cell in _as_sequence(value, "headers")]

    @field_validator("rows", mode="before")
    @classmethod
    def _coerce_rows(cls, value: Any) -> list[list[str]]:
        return [
            [_cell_text(cell) for cell in _as_sequence(row, "row")]
            for row in _as_sequence(value, "rows")
        ]

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    @property
    def num_cols(self) -> int:
        return len(self.headers) if self.headers else (len(self.rows[0]) if self.rows else 0)


def _as_sequence(value: Any, what: str) -> list[Any]:
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{what} must be a list")
    return list(value)


def _cell_text(cell: Any) -> str:
    """Spreadsheet decoders hand over numbers and blanks as-is."""
    if cell is None:
        return ""
    return str(cell)
