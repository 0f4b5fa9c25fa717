"""
Tests for FastAPI Endpoints - REAL Integration Tests.

Uses FastAPI TestClient for actual HTTP requests against a fresh
in-memory session per test.
"""

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_session
from docaudit.session import AnalysisSession

# ============================================================================
# Client Fixture
# ============================================================================


@pytest.fixture
def client():
    """Create FastAPI TestClient with an isolated session."""
    session = AnalysisSession()
    app.dependency_overrides[get_session] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


def _add(client, name: str, text: str, **extra) -> dict:
    response = client.post("/documents", json={"name": name, "text": text, **extra})
    assert response.status_code == 200
    return response.json()


# ============================================================================
# Health & Config Endpoints
# ============================================================================


class TestHealthEndpoints:
    """Tests for health and config endpoints."""

    def test_health_check(self, client) -> None:
        """Test /health endpoint returns healthy status."""
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data

    def test_config_endpoint(self, client) -> None:
        """Test /config endpoint returns configuration."""
        response = client.get("/config")

        assert response.status_code == 200
        data = response.json()
        assert "value_tolerance" in data
        assert "max_upload_bytes" in data
        assert data["supported_types"] == [".txt", ".md", ".csv"]


# ============================================================================
# Document Endpoints
# ============================================================================


class TestDocumentEndpoints:
    """Tests for adding, listing and removing documents."""

    def test_add_document(self, client) -> None:
        """Test decoded documents are accepted and extracted."""
        data = _add(client, "report.txt", "2024 Revenue: $150,000", document_id="r1")

        assert data["status"] == "success"
        assert data["document_id"] == "r1"
        assert data["fact_count"] == 2

    def test_add_document_with_tables(self, client) -> None:
        """Test tables in the payload are extracted."""
        data = _add(
            client,
            "model.xlsx",
            "",
            tables=[{"headers": ["Metric", "2024"], "rows": [["Revenue", "150,000"]]}],
        )

        assert data["fact_count"] == 1

    def test_add_document_requires_name(self, client) -> None:
        """Test an empty name is rejected."""
        response = client.post("/documents", json={"name": "", "text": "Total: 1"})

        assert response.status_code == 422

    def test_list_documents(self, client) -> None:
        """Test documents are listed in insertion order."""
        _add(client, "a.txt", "Total: 1")
        _add(client, "b.txt", "Total: 2")

        response = client.get("/documents")

        data = response.json()
        assert data["document_count"] == 2
        assert [d["name"] for d in data["documents"]] == ["a.txt", "b.txt"]

    def test_document_facts(self, client) -> None:
        """Test facts of a document can be fetched."""
        _add(client, "a.txt", "Operating expenses: (12,500)", document_id="a")

        response = client.get("/documents/a/facts")

        assert response.status_code == 200
        facts = response.json()["facts"]
        assert facts == [
            {
                "value": -12500.0,
                "context": "expense: Operating expenses: (12,500)",
                "location": "Line 1",
            }
        ]

    def test_unknown_document_facts(self, client) -> None:
        """Test unknown IDs return 404."""
        response = client.get("/documents/missing/facts")

        assert response.status_code == 404

    def test_delete_document(self, client) -> None:
        """Test documents can be removed."""
        _add(client, "a.txt", "Total: 1", document_id="a")

        response = client.delete("/documents/a")

        assert response.status_code == 200
        assert client.get("/documents").json()["document_count"] == 0
        assert client.delete("/documents/a").status_code == 404


# ============================================================================
# Upload Endpoint Tests
# ============================================================================


class TestUploadEndpoint:
    """Tests for /documents/upload endpoint."""

    def test_upload_csv(self, client) -> None:
        """Test CSV uploads are decoded and extracted."""
        response = client.post(
            "/documents/upload",
            files={"file": ("financials.csv", b'Metric,2024\nRevenue,"150,000"\n', "text/csv")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["document_type"] == "csv"
        assert data["tables"] == 1
        assert data["name"] == "financials.csv"
        assert data["fact_count"] == 3

    def test_upload_rejects_binary_formats(self, client) -> None:
        """Test PDF uploads are rejected with a helpful message."""
        response = client.post(
            "/documents/upload",
            files={"file": ("deck.pdf", b"%PDF-1.7", "application/pdf")},
        )

        assert response.status_code == 400
        assert ".csv" in response.json()["detail"]

    def test_upload_requires_file(self, client) -> None:
        """Test that file is required."""
        response = client.post("/documents/upload")

        # FastAPI returns 422 for missing required fields
        assert response.status_code == 422

    def test_upload_too_large(self, client, monkeypatch) -> None:
        """Test uploads over the size limit are refused."""
        from app.main import settings

        monkeypatch.setattr(settings, "max_upload_bytes", 8)

        response = client.post(
            "/documents/upload",
            files={"file": ("memo.txt", b"Revenue: 150,000", "text/plain")},
        )

        assert response.status_code == 413


# ============================================================================
# Analysis Endpoint Tests
# ============================================================================


class TestAnalyzeEndpoint:
    """Tests for /analyze and /report endpoints."""

    def test_report_before_analysis(self, client) -> None:
        """Test /report is 404 until an analysis has run."""
        response = client.get("/report")

        assert response.status_code == 404

    def test_analyze_finds_restatement(self, client) -> None:
        """Test a restated revenue figure is reported."""
        _add(client, "Financials.xlsx", "2024 Revenue: 150,000")
        _add(client, "Board Deck.pdf", "2024 Revenue: 145,000")

        response = client.post("/analyze")

        assert response.status_code == 200
        data = response.json()
        assert data["inconsistency_count"] == 1
        assert data["total_facts"] == 4
        item = data["inconsistencies"][0]
        assert item["field_name"] == "2024 Revenue"
        assert item["is_consistent"] is False
        assert {v["document_name"] for v in item["values"]} == {"Financials.xlsx", "Board Deck.pdf"}

    def test_report_returns_latest(self, client) -> None:
        """Test /report returns the last analysis."""
        _add(client, "a.txt", "2023 Total: 10,000")
        _add(client, "b.txt", "2023 Total: 10,000")
        report_id = client.post("/analyze").json()["report_id"]

        response = client.get("/report")

        assert response.status_code == 200
        data = response.json()
        assert data["report_id"] == report_id
        assert data["inconsistency_count"] == 0
        assert "No inconsistencies found" in data["summary"]

    def test_analyze_single_document(self, client) -> None:
        """Test one document yields an empty report, not an error."""
        _add(client, "a.txt", "2024 Revenue: 150,000")

        response = client.post("/analyze")

        assert response.status_code == 200
        assert response.json()["inconsistencies"] == []
