"""
Test Suite for Books API

Test Organization:
- conftest.py: Shared fixtures (test database, client, tokens, sample data)
- test_books.py: Tests for /api/v1/books endpoints
- test_auth.py: Tests for the bearer token gate
- test_validation.py: Tests for payload validation and id parsing
- test_store.py: Tests for the BookStore persistence gateway
- test_main.py: Tests for the app factory, health and root endpoints
- test_config.py: Tests for settings validation
- test_rate_limiter.py: Tests for client identification and route limits

Running Tests:
    # Run all tests
    pytest

    # Run with coverage
    pytest --cov=app --cov-report=html

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
