"""
Analysis Session - In-Memory Document State.

Holds the fact sets of the documents a user has loaded and the report of
the most recent cross-document analysis. Running a new analysis replaces
the previous report.
"""

from collections.abc import Iterable
from uuid import uuid4

from docaudit.extraction.fact_extractor import FactExtractor, TableInput
from docaudit.ingestion.schemas import ProcessedDocument
from docaudit.matching.matcher import CrossDocumentMatcher
from docaudit.matching.schemas import ConsistencyReport, DocumentFactSet
from docaudit.utils.logger import LogContext, TraceObserver, get_logger

logger = get_logger(__name__)


class DocumentNotFoundError(KeyError):
    """Raised when a document ID is not part of the session."""

    pass


class AnalysisSession:
    """
    Documents and analysis results for one user session.

    Usage:
        session = AnalysisSession()
        session.add_document("q3.csv", text, tables)
        session.add_document("deck.txt", text)
        report = session.analyze()
    """

    def __init__(
        self,
        tolerance: float = 0.0,
        observer: TraceObserver | None = None,
    ) -> None:
        """
        Initialize an empty session.

        Args:
            tolerance: Relative tolerance passed to the matcher
            observer: Optional trace callback for extractor and matcher
        """
        self.extractor = FactExtractor(observer=observer)
        self.matcher = CrossDocumentMatcher(tolerance=tolerance, observer=observer)
        self._documents: dict[str, DocumentFactSet] = {}
        self._latest_report: ConsistencyReport | None = None

    @property
    def documents(self) -> list[DocumentFactSet]:
        """Fact sets in the order they were added."""
        return list(self._documents.values())

    @property
    def latest_report(self) -> ConsistencyReport | None:
        return self._latest_report

    def add_document(
        self,
        name: str,
        text: str | None,
        tables: Iterable[TableInput] | None = None,
        document_id: str | None = None,
    ) -> DocumentFactSet:
        """
        Extract facts from a document and keep them for analysis.

        Args:
            name: Display name (usually the filename)
            text: Flat document text
            tables: Document tables
            document_id: Optional ID; a new one is generated when omitted

        Returns:
            The stored DocumentFactSet
        """
        doc_id = document_id or str(uuid4())

        with LogContext(logger, document_name=name):
            facts = self.extractor.extract(text, tables)
            logger.info(f"Extracted {len(facts)} facts from {name}")

        fact_set = DocumentFactSet(id=doc_id, name=name, facts=facts)
        self._documents[doc_id] = fact_set
        return fact_set

    def add_processed(self, document: ProcessedDocument) -> DocumentFactSet:
        """Add a document produced by the loader."""
        return self.add_document(document.filename, document.text, document.tables)

    def get_document(self, document_id: str) -> DocumentFactSet:
        """
        Look up a stored document.

        Raises:
            DocumentNotFoundError: If the ID is unknown
        """
        try:
            return self._documents[document_id]
        except KeyError:
            raise DocumentNotFoundError(document_id) from None

    def remove_document(self, document_id: str) -> DocumentFactSet:
        """
        Drop a document from the session.

        Raises:
            DocumentNotFoundError: If the ID is unknown
        """
        fact_set = self.get_document(document_id)
        del self._documents[document_id]
        logger.info(f"Removed {fact_set.name} from session")
        return fact_set

    def analyze(self) -> ConsistencyReport:
        """
        Cross-reference all stored documents.

        Returns:
            A fresh ConsistencyReport, which also becomes latest_report
        """
        report = self.matcher.analyze(self.documents)
        self._latest_report = report
        logger.info(report.to_summary().splitlines()[0])
        return report

    def clear(self) -> None:
        """Forget all documents and results."""
        self._documents.clear()
        self._latest_report = None
