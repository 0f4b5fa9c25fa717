"""
Document Loader - Text-Format Decoding.

Turns plain text, markdown and CSV files into the flat text and tables the
fact extractor consumes. CSV files yield one table (first row as headers)
and a text rendering of every row, so their numbers are seen both as cells
and as lines.

Binary formats (PDF, Word, Excel) must be decoded before they reach here.
"""

import csv
import io
from pathlib import Path

from docaudit.extraction.schemas import TableData
from docaudit.ingestion.schemas import DocumentType, ProcessedDocument
from docaudit.utils.logger import get_logger

logger = get_logger(__name__)


class DocumentLoaderError(Exception):
    """Raised when a document cannot be loaded."""

    pass


SUFFIX_TYPES: dict[str, DocumentType] = {
    ".txt": DocumentType.TEXT,
    ".text": DocumentType.TEXT,
    ".md": DocumentType.MARKDOWN,
    ".markdown": DocumentType.MARKDOWN,
    ".csv": DocumentType.CSV,
    ".pdf": DocumentType.PDF,
    ".docx": DocumentType.DOCX,
    ".xlsx": DocumentType.XLSX,
}


def detect_document_type(filename: str) -> DocumentType:
    """Document type from the file suffix."""
    return SUFFIX_TYPES.get(Path(filename).suffix.lower(), DocumentType.UNKNOWN)


def load_document(path: Path | str) -> ProcessedDocument:
    """
    Load a document from disk.

    Args:
        path: File path

    Returns:
        ProcessedDocument

    Raises:
        DocumentLoaderError: If the file is missing or not a text format
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentLoaderError(f"File not found: {path}")

    return load_document_bytes(path.name, path.read_bytes())


def load_document_bytes(filename: str, data: bytes) -> ProcessedDocument:
    """
    Decode an uploaded document.

    Args:
        filename: Original filename, used to detect the type
        data: Raw file content

    Returns:
        ProcessedDocument

    Raises:
        DocumentLoaderError: If the type is not a supported text format
    """
    document_type = detect_document_type(filename)
    if not document_type.is_supported:
        raise DocumentLoaderError(
            f"Unsupported document type for '{filename}': "
            f"only .txt, .md and .csv files can be loaded directly"
        )

    content = _decode(data, filename)

    if document_type == DocumentType.CSV:
        text, tables = parse_csv(content)
    else:
        text, tables = content, []

    logger.info(f"Loaded {filename}: {len(text)} chars, {len(tables)} tables")

    return ProcessedDocument(
        filename=filename,
        document_type=document_type,
        text=text,
        tables=tables,
    )


def parse_csv(content: str) -> tuple[str, list[TableData]]:
    """
    Parse CSV content into a text rendering and a single table.

    Args:
        content: Decoded CSV text

    Returns:
        (text, tables) - tables is empty for an empty file

    Raises:
        DocumentLoaderError: If the CSV is malformed
    """
    try:
        rows = [row for row in csv.reader(io.StringIO(content)) if any(cell.strip() for cell in row)]
    except csv.Error as e:
        raise DocumentLoaderError(f"Malformed CSV: {e}") from e

    if not rows:
        return "", []

    text = "\n".join(" ".join(row) for row in rows)
    table = TableData(headers=rows[0], rows=rows[1:])
    return text, [table]


def _decode(data: bytes, filename: str) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.warning(f"{filename} is not valid UTF-8, decoding as latin-1")
        return data.decode("latin-1")
