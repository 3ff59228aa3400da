"""
Test suite for the Matchday API.

Test Structure:
    - conftest.py: Shared fixtures, factories and API-Football payloads
    - test_models.py: Tests for Pydantic models and the bet lifecycle
    - test_mappers.py: Tests for API-Football payload mapping
    - test_football_api.py: Tests for the HTTP client
    - test_services.py: Tests for business logic services
    - test_api.py: Tests for the HTTP endpoints
    - test_repositories.py: Tests for database repositories (needs MongoDB)

Running Tests:
    pytest                                  # Run all tests
    pytest -v                               # Verbose output
    pytest tests/test_api.py                # Run specific test file
    TEST_MONGO_URI=mongodb://... pytest     # Include repository tests
"""
