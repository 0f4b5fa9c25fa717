"""
Match Key Derivation.

Turns a fact's context into the keys it is indexed under. Facts sharing a
key across documents are presumed to report the same real-world quantity.
"""

import re
from dataclasses import dataclass, field
from enum import IntEnum

from docaudit.extraction.classifier import ClassificationRule, classify
from docaudit.extraction.schemas import MetricTag, NumericFact


class KeyTier(IntEnum):
    """Key strength; lower tiers are processed first."""

    YEAR_METRIC = 0
    YEAR_ONLY = 1
    METRIC_ONLY = 2
    CONTEXT = 3


@dataclass(frozen=True)
class MatchKey:
    """An index key plus what it is about, for duplicate suppression."""

    key: str
    tier: KeyTier
    subjects: frozenset[str] = field(default_factory=frozenset)

    @property
    def field_name(self) -> str:
        return render_field_name(self.key)


def normalize_context(context: str) -> str:
    """Lowercase, keep letters, digits and single spaces."""
    cleaned = re.sub(r"[^a-z0-9 ]", "", context.lower())
    return re.sub(r"\s+", " ", cleaned).strip()


def render_field_name(key: str) -> str:
    """'2024_revenue' -> '2024 Revenue'."""
    return key.replace("_", " ").title()


def fact_tag(
    fact: NumericFact,
    rules: list[ClassificationRule] | None = None,
) -> MetricTag:
    """
    Tag a fact from the label its context starts with.

    The excerpt after the label is not re-read, so a year inside a table
    cell does not leak into the tag. Contexts without a label are
    classified as a whole.
    """
    label, separator, _ = fact.context.partition(": ")
    if separator:
        tag = MetricTag.from_label(label)
        if tag is not None:
            return tag
    return classify(fact.context, rules)


def derive_keys(
    fact: NumericFact,
    rules: list[ClassificationRule] | None = None,
) -> list[MatchKey]:
    """
    Derive every key a fact qualifies for.

    Args:
        fact: Extracted fact
        rules: Classification rules for contexts without a tag label

    Returns:
        Keys from strongest to weakest
    """
    tag = fact_tag(fact, rules)
    keys: list[MatchKey] = []

    metric = tag.metric_type.value
    year = tag.fiscal_year

    if tag.has_metric and tag.has_year:
        keys.append(MatchKey(
            key=f"{year}_{metric}",
            tier=KeyTier.YEAR_METRIC,
            subjects=frozenset({f"metric:{metric}", f"year:{year}"}),
        ))
    elif tag.has_year:
        keys.append(MatchKey(
            key=f"{year}_any",
            tier=KeyTier.YEAR_ONLY,
            subjects=frozenset({f"year:{year}"}),
        ))
    elif tag.has_metric:
        keys.append(MatchKey(
            key=f"any_{metric}",
            tier=KeyTier.METRIC_ONLY,
            subjects=frozenset({f"metric:{metric}"}),
        ))

    # Exact-context fallback catches duplicates the tag heuristics miss
    normalized = normalize_context(fact.context)
    if normalized:
        keys.append(MatchKey(
            key=normalized,
            tier=KeyTier.CONTEXT,
            subjects=frozenset({f"context:{normalized}"}),
        ))

    return keys
