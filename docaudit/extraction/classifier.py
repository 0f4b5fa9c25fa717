"""
Metric Classification Rules.

Tags a line or cell context with a metric type and fiscal year.
Rules are evaluated top to bottom; the first match wins.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from docaudit.extraction.schemas import MetricTag, MetricType


@dataclass(frozen=True)
class ClassificationRule:
    """A predicate over lowercased context and the metric it implies."""

    metric_type: MetricType
    predicate: Callable[[str], bool]

    def matches(self, text: str) -> bool:
        return self.predicate(text)


def keyword_rule(metric_type: MetricType, *keywords: str) -> ClassificationRule:
    """
    Build a rule that fires when any keyword occurs in the context.

    Args:
        metric_type: Metric assigned when the rule fires
        keywords: Lowercase substrings to look for

    Returns:
        ClassificationRule
    """
    words = tuple(k.lower() for k in keywords)
    return ClassificationRule(
        metric_type=metric_type,
        predicate=lambda text: any(word in text for word in words),
    )


# Priority order matters: "net income" is revenue, "net loss" is profit
DEFAULT_RULES: list[ClassificationRule] = [
    keyword_rule(MetricType.REVENUE, "revenue", "sales", "income"),
    keyword_rule(MetricType.EXPENSE, "expense", "cost", "expenditure"),
    keyword_rule(MetricType.PROFIT, "profit", "net", "earnings"),
    keyword_rule(MetricType.TOTAL, "total", "sum"),
    keyword_rule(MetricType.ASSET, "asset"),
    keyword_rule(MetricType.LIABILITY, "liability", "liabilities"),
]

MIN_FISCAL_YEAR = 2010
MAX_FISCAL_YEAR = 2029

# Four digits not glued to other digits, so "FY2024" counts and "120245" does not
YEAR_PATTERN = re.compile(r"(?<!\d)(20[12]\d)(?!\d)")


def detect_metric(
    text: str,
    rules: list[ClassificationRule] | None = None,
) -> MetricType:
    """
    Return the metric of the first rule matching the lowercased text.

    Args:
        text: Context text (any case)
        rules: Rule table, DEFAULT_RULES when omitted

    Returns:
        MetricType, UNKNOWN if no rule fires
    """
    lowered = text.lower()
    for rule in rules if rules is not None else DEFAULT_RULES:
        if rule.matches(lowered):
            return rule.metric_type
    return MetricType.UNKNOWN


def detect_year(text: str) -> int | None:
    """First fiscal year between 2010 and 2029 found in the text."""
    for match in YEAR_PATTERN.finditer(text):
        year = int(match.group(1))
        if MIN_FISCAL_YEAR <= year <= MAX_FISCAL_YEAR:
            return year
    return None


def classify(
    text: str,
    rules: list[ClassificationRule] | None = None,
) -> MetricTag:
    """
    Classify context text into a MetricTag.

    Metric and year are detected independently.

    Args:
        text: Context text (any case)
        rules: Optional rule table override

    Returns:
        MetricTag
    """
    return MetricTag(
        metric_type=detect_metric(text, rules),
        fiscal_year=detect_year(text),
    )
