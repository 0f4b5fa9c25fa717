"""
Ingestion Layer - Text-format document loading.
"""

from docaudit.ingestion.loader import (
    DocumentLoaderError,
    detect_document_type,
    load_document,
    load_document_bytes,
    parse_csv,
)
from docaudit.ingestion.schemas import DocumentType, ProcessedDocument

__all__ = [
    "DocumentLoaderError",
    "DocumentType",
    "ProcessedDocument",
    "detect_document_type",
    "load_document",
    "load_document_bytes",
    "parse_csv",
]
