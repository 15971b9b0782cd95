"""
Unit Tests for Chess Analyzer

This package contains unit tests for all analyzer components. The engine
is replaced by the scripted FakeEngine transport from conftest.py; tests
that need a real Stockfish are skipped when none is installed.

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_san.py

    # Run with coverage
    pytest tests/ --cov=chess_analyzer --cov-report=html

    # Run specific test
    pytest tests/test_session.py::TestFailures::test_search_timeout_returns_partial_result

Dependencies:
    - pytest: Test framework
    - pytest-cov: Coverage reporting
    - python-chess: Reference board for SAN replay checks
"""
