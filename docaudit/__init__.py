"""
Document Consistency Checker - Source Package.

This package contains the core functionality for:
- Numeric fact extraction from document text and tables
- Cross-document matching of restated metrics
- Text-format document loading and in-memory analysis sessions
- Utility functions
"""

from docaudit.extraction import (
    FactExtractor,
    MetricTag,
    MetricType,
    NumericFact,
    TableData,
    extract_facts,
)
from docaudit.ingestion import DocumentLoaderError, ProcessedDocument, load_document
from docaudit.matching import (
    ConsistencyReport,
    CrossDocumentMatcher,
    DocumentFactSet,
    Inconsistency,
    InconsistencyValue,
    find_inconsistencies,
)
from docaudit.session import AnalysisSession, DocumentNotFoundError

__version__ = "0.1.0"

__all__ = [
    # Extraction
    "FactExtractor",
    "extract_facts",
    "MetricTag",
    "MetricType",
    "NumericFact",
    "TableData",
    # Matching
    "CrossDocumentMatcher",
    "find_inconsistencies",
    "ConsistencyReport",
    "DocumentFactSet",
    "Inconsistency",
    "InconsistencyValue",
    # Ingestion
    "DocumentLoaderError",
    "ProcessedDocument",
    "load_document",
    # Session
    "AnalysisSession",
    "DocumentNotFoundError",
]
