"""
Cross-Document Matcher - Inconsistent Restatements Across Documents.

Indexes every fact under its match keys once, then inspects each key that
at least two documents reach. A key whose documents report different values
becomes an Inconsistency.

Weaker keys that repeat a finding already reported under a stronger key
(subjects covered by that key, same values) are suppressed, and so are
context keys repeating an emitted finding over the same documents.
"""

import time
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from docaudit.extraction.classifier import ClassificationRule
from docaudit.extraction.schemas import NumericFact
from docaudit.matching.keys import KeyTier, MatchKey, derive_keys
from docaudit.matching.schemas import (
    ConsistencyReport,
    DocumentFactSet,
    Inconsistency,
    InconsistencyValue,
)
from docaudit.utils.logger import TraceObserver, get_logger

logger = get_logger(__name__)


MIN_DOCUMENTS = 2


@dataclass
class _Entry:
    document_id: str
    document_name: str
    fact: NumericFact


@dataclass
class _Bucket:
    match_key: MatchKey
    entries: list[_Entry] = field(default_factory=list)

    def values_by_document(self) -> dict[str, list[float]]:
        """Distinct values per document id, in document order."""
        grouped: dict[str, list[float]] = {}
        for entry in self.entries:
            values = grouped.setdefault(entry.document_id, [])
            if entry.fact.value not in values:
                values.append(entry.fact.value)
        return grouped


@dataclass(frozen=True)
class _Finding:
    match_key: MatchKey
    signature: tuple[float, ...]
    document_ids: frozenset[str]

    def repeats(self, earlier: "_Finding") -> bool:
        """
        True when an already emitted finding describes the same disagreement.

        A tagged key repeats an earlier key whose subjects cover its own
        ("2024 Any" under "2024 Revenue"); sibling keys never do. A context
        key repeats any earlier finding over the same documents and values.
        """
        if self.signature != earlier.signature:
            return False
        if self.match_key.tier == KeyTier.CONTEXT:
            return self.document_ids == earlier.document_ids
        return self.match_key.subjects <= earlier.match_key.subjects


class CrossDocumentMatcher:
    """
    Find metrics whose value differs across documents.

    Usage:
        matcher = CrossDocumentMatcher()
        inconsistencies = matcher.find_inconsistencies([doc_a, doc_b])
    """

    def __init__(
        self,
        tolerance: float = 0.0,
        rules: list[ClassificationRule] | None = None,
        observer: TraceObserver | None = None,
    ) -> None:
        """
        Initialize the matcher.

        Args:
            tolerance: Relative difference treated as equal (0.01 = 1%).
                The default reports any difference.
            rules: Classification rules for fact contexts without a tag label
            observer: Optional callback receiving trace events
        """
        if tolerance < 0:
            raise ValueError("tolerance must be >= 0")
        self.tolerance = tolerance
        self.rules = rules
        self.observer = observer

    def find_inconsistencies(
        self,
        documents: Sequence[DocumentFactSet],
    ) -> list[Inconsistency]:
        """
        Cross-reference facts across documents.

        Args:
            documents: Fact sets, one per document

        Returns:
            Inconsistencies, strongest keys first; empty for fewer than 2 documents
        """
        if len(documents) < MIN_DOCUMENTS:
            self._trace("skipped", documents=len(documents), reason="fewer than 2 documents")
            return []

        index = self._build_index(documents)

        inconsistencies: list[Inconsistency] = []
        emitted: list[_Finding] = []

        # Stable sort keeps first-seen order inside each tier
        for bucket in sorted(index.values(), key=lambda b: b.match_key.tier):
            by_document = bucket.values_by_document()
            if len(by_document) < MIN_DOCUMENTS:
                continue

            if self._documents_agree(by_document.values()):
                self._trace("consistent", key=bucket.match_key.key, documents=len(by_document))
                continue

            finding = _Finding(
                match_key=bucket.match_key,
                signature=tuple(sorted(entry.fact.value for entry in bucket.entries)),
                document_ids=frozenset(by_document),
            )
            if any(finding.repeats(earlier) for earlier in emitted):
                self._trace("duplicate_suppressed", key=bucket.match_key.key)
                continue
            emitted.append(finding)

            inconsistency = self._build_inconsistency(bucket, by_document)
            self._trace(
                "inconsistency",
                key=bucket.match_key.key,
                documents=len(by_document),
                values=len(inconsistency.values),
            )
            inconsistencies.append(inconsistency)

        logger.info(
            f"Cross-document check: {len(documents)} documents, "
            f"{len(index)} keys, {len(inconsistencies)} inconsistencies"
        )
        return inconsistencies

    def analyze(self, documents: Sequence[DocumentFactSet]) -> ConsistencyReport:
        """
        Run a full analysis pass and wrap the result in a report.

        Args:
            documents: Fact sets, one per document

        Returns:
            ConsistencyReport
        """
        start_time = time.time()
        inconsistencies = self.find_inconsistencies(documents)

        return ConsistencyReport(
            document_names=[doc.name for doc in documents],
            total_facts=sum(doc.fact_count for doc in documents),
            inconsistencies=inconsistencies,
            analysis_time_seconds=time.time() - start_time,
        )

    def _build_index(self, documents: Sequence[DocumentFactSet]) -> dict[str, _Bucket]:
        """Single pass: key -> every (document, fact) registered under it."""
        index: dict[str, _Bucket] = {}
        total_facts = 0

        for document in documents:
            for fact in document.facts:
                total_facts += 1
                for match_key in derive_keys(fact, self.rules):
                    bucket = index.get(match_key.key)
                    if bucket is None:
                        bucket = index[match_key.key] = _Bucket(match_key)
                    bucket.entries.append(_Entry(document.id, document.name, fact))

        self._trace("index_built", facts=total_facts, keys=len(index))
        return index

    def _documents_agree(self, value_sets: Iterable[list[float]]) -> bool:
        """True when every document reports the same set of values."""
        sets = list(value_sets)
        first = sets[0]
        return all(
            self._same_values(first, other) and self._same_values(other, first)
            for other in sets[1:]
        )

    def _same_values(self, left: list[float], right: list[float]) -> bool:
        """Every value on the left has an equal (within tolerance) value on the right."""
        return all(any(self._equal(a, b) for b in right) for a in left)

    def _equal(self, a: float, b: float) -> bool:
        if a == b:
            return True
        if self.tolerance == 0:
            return False
        return abs(a - b) <= self.tolerance * max(abs(a), abs(b))

    def _build_inconsistency(
        self,
        bucket: _Bucket,
        by_document: dict[str, list[float]],
    ) -> Inconsistency:
        match_key = bucket.match_key
        field_name = match_key.field_name

        names = {entry.document_id: entry.document_name for entry in bucket.entries}
        reported = "; ".join(
            f"{names[doc_id]}: {', '.join(format_value(v) for v in values)}"
            for doc_id, values in by_document.items()
        )

        return Inconsistency(
            field_name=field_name,
            values=[
                InconsistencyValue(
                    document_name=entry.document_name,
                    value=entry.fact.value,
                    location=entry.fact.location,
                )
                for entry in bucket.entries
            ],
            is_consistent=False,
            error_message=(
                f"Value of '{field_name}' differs across {len(by_document)} documents ({reported})"
            ),
            match_key=match_key.key,
            document_ids=list(by_document),
            validation_type=(
                "consistency_check" if match_key.tier == KeyTier.CONTEXT else "cross_reference"
            ),
        )

    def _trace(self, event: str, **payload: Any) -> None:
        if self.observer is not None:
            self.observer(event, payload)


def format_value(value: float) -> str:
    """150000.0 -> "150,000"; 1234.5 -> "1,234.50"."""
    if value.is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def find_inconsistencies(
    documents: Sequence[DocumentFactSet],
    tolerance: float = 0.0,
    observer: TraceObserver | None = None,
) -> list[Inconsistency]:
    """
    Convenience function to cross-reference documents with default settings.

    Args:
        documents: Fact sets, one per document
        tolerance: Relative difference treated as equal
        observer: Optional trace callback

    Returns:
        List of Inconsistency records
    """
    return CrossDocumentMatcher(tolerance=tolerance, observer=observer).find_inconsistencies(documents)
