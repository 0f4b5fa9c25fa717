"""
Document Consistency Checker - FastAPI Application.

Provides REST API endpoints for loading documents, inspecting their
extracted facts, and running cross-document consistency analysis.
"""

from app.config import Settings, get_settings
from app.main import app

__all__ = [
    "app",
    "get_settings",
    "Settings",
]
