# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the EnzoLearn API:
# - test_models.py: Pydantic model validation
# - test_security.py: password hashing and JWT handling
# - test_*_api.py: endpoint tests against the in-memory Supabase fake
# - test_speech_service.py, test_supabase_client.py, test_rate_limit.py
#
# Run tests with: pytest
# =============================================================================
