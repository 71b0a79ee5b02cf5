# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the admin business logic:
# - models/: Pydantic request schemas, validated once at the API boundary
# - services/: Per-resource operations against the Supabase database and
#   storage
#
# Code in this package never sees a Request or Response object.
# This keeps the logic testable without an HTTP client.
# =============================================================================
