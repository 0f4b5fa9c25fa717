"""
Extraction Layer - Numeric Facts from Documents.

Lexical grammar for amounts, rule-based metric classification and the
fact extractor built on them.
"""

from docaudit.extraction.classifier import (
    DEFAULT_RULES,
    ClassificationRule,
    classify,
    detect_metric,
    detect_year,
    keyword_rule,
)
from docaudit.extraction.fact_extractor import FactExtractor, extract_facts
from docaudit.extraction.numbers import extract_amounts, find_candidates, parse_amount
from docaudit.extraction.schemas import MetricTag, MetricType, NumericFact, TableData

__all__ = [
    # Extractor
    "FactExtractor",
    "extract_facts",
    # Classification
    "ClassificationRule",
    "DEFAULT_RULES",
    "classify",
    "detect_metric",
    "detect_year",
    "keyword_rule",
    # Numbers
    "extract_amounts",
    "find_candidates",
    "parse_amount",
    # Schemas
    "MetricTag",
    "MetricType",
    "NumericFact",
    "TableData",
]
