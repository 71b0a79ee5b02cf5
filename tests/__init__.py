# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the OMR Hub admin API:
# - fakes.py: in-memory Supabase client (tables, RPC, storage)
# - test_models.py / test_utils.py: schema and helper unit tests
# - test_<resource>.py: endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
