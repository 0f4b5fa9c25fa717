"""
Pydantic Schemas for Matching Layer.

Document fact sets going into the matcher and the inconsistency records
and report coming out of it.
"""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from docaudit.extraction.schemas import NumericFact


class DocumentFactSet(BaseModel):
    """All facts extracted from one document."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Document identifier")
    name: str = Field(..., description="Document name shown in reports")
    facts: list[NumericFact] = Field(default_factory=list)

    @property
    def fact_count(self) -> int:
        return len(self.facts)


class InconsistencyValue(BaseModel):
    """One document's reported value for a metric."""

    model_config = ConfigDict(frozen=True)

    document_name: str
    value: float
    location: str


class Inconsistency(BaseModel):
    """
    A metric whose value differs across documents.

    Created only by the matcher and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    field_name: str = Field(..., description="Human-friendly metric name, e.g. '2024 Revenue'")
    values: list[InconsistencyValue] = Field(..., description="Every reported value, in document order")
    is_consistent: bool = Field(default=False)
    error_message: str = Field(..., description="Explanation of the disagreement")

    match_key: str = Field(..., description="Index key the values were grouped under")
    document_ids: list[str] = Field(default_factory=list)
    validation_type: str = Field(default="cross_reference")

    @property
    def document_names(self) -> list[str]:
        """Contributing document names without repeats."""
        return list(dict.fromkeys(v.document_name for v in self.values))

    @property
    def distinct_values(self) -> list[float]:
        return sorted(set(v.value for v in self.values))


class ConsistencyReport(BaseModel):
    """Result of one cross-document analysis pass."""

    report_id: UUID = Field(default_factory=uuid4)
    created_at: datetime = Field(default_factory=datetime.utcnow)

    document_names: list[str] = Field(default_factory=list)
    total_facts: int = 0
    inconsistencies: list[Inconsistency] = Field(default_factory=list)

    analysis_time_seconds: float = 0.0

    @property
    def inconsistency_count(self) -> int:
        return len(self.inconsistencies)

    @property
    def has_inconsistencies(self) -> bool:
        return self.inconsistency_count > 0

    def to_summary(self) -> str:
        """Generate text summary."""
        if len(self.document_names) < 2:
            return (
                f"Cross-document check needs at least 2 documents "
                f"({len(self.document_names)} loaded)."
            )
        if not self.has_inconsistencies:
            return (
                f"Analyzed {len(self.document_names)} documents ({self.total_facts} facts). "
                f"No inconsistencies found."
            )

        summary = (
            f"Analyzed {len(self.document_names)} documents ({self.total_facts} facts). "
            f"Found {self.inconsistency_count} inconsistencies:\n"
        )
        for item in self.inconsistencies[:10]:
            summary += f"  - {item.field_name}: {', '.join(item.document_names)}\n"

        if self.inconsistency_count > 10:
            summary += f"  ... and {self.inconsistency_count - 10} more\n"

        return summary
