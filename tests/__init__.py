"""
Test suite for the numeric consistency engine.

Organized by module:
- test_numbers.py - Numeric literal grammar and normalization
- test_classifier.py - Metric and fiscal year rules
- test_fact_extractor.py - Fact extraction from text and tables
- test_matcher.py - Cross-document matching and dedup
- test_loader.py - Text/CSV document loading
- test_session.py - Session state and logging helpers
- test_api.py - FastAPI endpoint tests
"""

# Test fixtures are provided in conftest.py
