"""
Matching Layer - Cross-Document Consistency.

Match key derivation, the key-index matcher and its report schemas.
"""

from docaudit.matching.keys import (
    KeyTier,
    MatchKey,
    derive_keys,
    fact_tag,
    normalize_context,
    render_field_name,
)
from docaudit.matching.matcher import CrossDocumentMatcher, find_inconsistencies, format_value
from docaudit.matching.schemas import (
    ConsistencyReport,
    DocumentFactSet,
    Inconsistency,
    InconsistencyValue,
)

__all__ = [
    # Matcher
    "CrossDocumentMatcher",
    "find_inconsistencies",
    "format_value",
    # Keys
    "KeyTier",
    "MatchKey",
    "derive_keys",
    "fact_tag",
    "normalize_context",
    "render_field_name",
    # Schemas
    "ConsistencyReport",
    "DocumentFactSet",
    "Inconsistency",
    "InconsistencyValue",
]
