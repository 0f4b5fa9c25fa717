"""
FastAPI Application Entry Point.

Document Consistency Checker API.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from app.config import get_settings
from docaudit.extraction.schemas import TableData
from docaudit.ingestion.loader import DocumentLoaderError, load_document_bytes
from docaudit.matching.schemas import ConsistencyReport, DocumentFactSet
from docaudit.session import AnalysisSession, DocumentNotFoundError
from docaudit.utils.logger import get_logger, logging_observer, setup_logging

logger = get_logger(__name__)
settings = get_settings()


@lru_cache
def get_session() -> AnalysisSession:
    """Process-wide session; documents live in memory only."""
    return AnalysisSession(
        tolerance=settings.value_tolerance,
        observer=logging_observer(get_logger("docaudit.trace")),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events."""
    # Startup
    setup_logging(settings.log_level)
    logger.info("Starting Consistency Checker API...")
    logger.info(f"Value tolerance: {settings.value_tolerance}")
    yield
    # Shutdown
    logger.info("Shutting down Consistency Checker API...")


app = FastAPI(
    title="Document Consistency Checker",
    description="Extracts numeric facts from business documents and flags metrics restated with different values",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DocumentPayload(BaseModel):
    """Already-decoded document content."""

    name: str = Field(..., min_length=1, description="Document name shown in reports")
    text: str = Field(default="", description="Flat document text")
    tables: list[TableData] = Field(default_factory=list, description="Decoded tables")
    document_id: str | None = Field(default=None, description="Optional caller-chosen ID")


def _document_summary(fact_set: DocumentFactSet) -> dict[str, Any]:
    return {
        "document_id": fact_set.id,
        "name": fact_set.name,
        "fact_count": fact_set.fact_count,
    }


def _report_payload(report: ConsistencyReport) -> dict[str, Any]:
    return {
        "report_id": str(report.report_id),
        "created_at": report.created_at.isoformat(),
        "summary": report.to_summary(),
        "document_names": report.document_names,
        "total_facts": report.total_facts,
        "inconsistency_count": report.inconsistency_count,
        "analysis_time_seconds": report.analysis_time_seconds,
        "inconsistencies": [
            {
                "field_name": item.field_name,
                "match_key": item.match_key,
                "validation_type": item.validation_type,
                "is_consistent": item.is_consistent,
                "error_message": item.error_message,
                "document_ids": item.document_ids,
                "values": [
                    {
                        "document_name": v.document_name,
                        "value": v.value,
                        "location": v.location,
                    }
                    for v in item.values
                ],
            }
            for item in report.inconsistencies
        ],
    }


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/config")
async def get_config() -> dict[str, Any]:
    """Get current configuration (non-sensitive values only)."""
    return {
        "value_tolerance": settings.value_tolerance,
        "max_upload_bytes": settings.max_upload_bytes,
        "supported_types": [".txt", ".md", ".csv"],
    }


@app.post("/documents")
async def add_document(
    payload: DocumentPayload,
    session: AnalysisSession = Depends(get_session),
) -> dict[str, Any]:
    """
    Add an already-decoded document.

    Facts are extracted immediately and kept for the next analysis.
    """
    fact_set = session.add_document(
        payload.name,
        payload.text,
        payload.tables,
        document_id=payload.document_id,
    )
    return {"status": "success", **_document_summary(fact_set)}


@app.post("/documents/upload")
async def upload_document(
    file: UploadFile = File(...),
    session: AnalysisSession = Depends(get_session),
) -> dict[str, Any]:
    """
    Upload a text, markdown or CSV document.

    Binary formats must be converted to text before upload.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    logger.info(f"Received document: {file.filename}")

    content = await file.read()
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"File exceeds {settings.max_upload_bytes} bytes",
        )

    try:
        document = load_document_bytes(file.filename, content)
    except DocumentLoaderError as e:
        raise HTTPException(status_code=400, detail=str(e))

    fact_set = session.add_processed(document)
    return {
        "status": "success",
        "document_type": document.document_type.value,
        "tables": document.num_tables,
        **_document_summary(fact_set),
    }


@app.get("/documents")
async def list_documents(
    session: AnalysisSession = Depends(get_session),
) -> dict[str, Any]:
    """List documents in the session."""
    documents = session.documents
    return {
        "status": "success",
        "document_count": len(documents),
        "documents": [_document_summary(doc) for doc in documents],
    }


@app.get("/documents/{document_id}/facts")
async def get_document_facts(
    document_id: str,
    session: AnalysisSession = Depends(get_session),
) -> dict[str, Any]:
    """Facts extracted from one document."""
    try:
        fact_set = session.get_document(document_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown document: {document_id}")

    return {
        "status": "success",
        **_document_summary(fact_set),
        "facts": [fact.model_dump() for fact in fact_set.facts],
    }


@app.delete("/documents/{document_id}")
async def delete_document(
    document_id: str,
    session: AnalysisSession = Depends(get_session),
) -> dict[str, str]:
    """Remove a document from the session."""
    try:
        fact_set = session.remove_document(document_id)
    except DocumentNotFoundError:
        raise HTTPException(status_code=404, detail=f"Unknown document: {document_id}")

    return {"status": "success", "document_id": fact_set.id}


@app.post("/analyze")
async def analyze_documents(
    session: AnalysisSession = Depends(get_session),
) -> dict[str, Any]:
    """
    Cross-reference every document in the session.

    Replaces the previous report. Fewer than two documents gives an empty report.
    """
    logger.info(f"Analysis requested for {len(session.documents)} documents")

    try:
        report = session.analyze()
    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        raise HTTPException(status_code=500, detail=f"Analysis failed: {str(e)}")

    return {"status": "success", **_report_payload(report)}


@app.get("/report")
async def get_report(
    session: AnalysisSession = Depends(get_session),
) -> dict[str, Any]:
    """Most recent analysis report."""
    report = session.latest_report
    if report is None:
        raise HTTPException(status_code=404, detail="No analysis has been run yet")

    return {"status": "success", **_report_payload(report)}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
    )
