"""
Unit Tests for opening-tree

Running Tests:
    # Run all tests
    pytest tests/

    # Run specific test file
    pytest tests/test_explorer.py

    # Run specific test
    pytest tests/test_parsing.py::TestParseCandidate::test_wrong_depth_ignored

Engine client tests run against a mocked subprocess and against a small
scripted engine (see conftest.py); no real Stockfish is required.

Dependencies:
    - pytest: Test framework
    - chess: Legal-move generation for the scripted engine
"""
