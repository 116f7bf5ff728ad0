"""
Test Suite for the Bookstore service

Test Organization:
- conftest.py: Shared fixtures (in-memory database, clients, sample books)
- test_books.py: Tests for the /books endpoints and /health
- test_database.py: Tests for the Database data access object and Book model
- test_config.py: Tests for Settings and application startup

Running Tests:
    pip install -e ".[test]"
    pytest -v
"""
