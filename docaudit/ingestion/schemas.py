"""
Pydantic Schemas for Ingestion Layer.

Decoded document content handed to the fact extractor.
"""

from enum import Enum

from pydantic import BaseModel, Field

from docaudit.extraction.schemas import TableData


class DocumentType(str, Enum):
    """Document types recognized by the loader."""

    TEXT = "text"
    MARKDOWN = "markdown"
    CSV = "csv"

    # Recognized but decoded upstream
    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"
    UNKNOWN = "unknown"

    @property
    def is_supported(self) -> bool:
        return self in (DocumentType.TEXT, DocumentType.MARKDOWN, DocumentType.CSV)


class ProcessedDocument(BaseModel):
    """Flat text plus simple tables decoded from one file."""

    filename: str = Field(..., description="Original filename")
    document_type: DocumentType = Field(..., description="Detected document type")
    text: str = Field(default="", description="Flat document text")
    tables: list[TableData] = Field(default_factory=list, description="Decoded tables")

    @property
    def num_tables(self) -> int:
        return len(self.tables)

    @property
    def is_empty(self) -> bool:
        return not self.text.strip() and not self.tables
