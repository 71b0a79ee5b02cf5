# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the OMR Hub admin API:
# - main.py: App entry point, middleware setup, error handlers
# - config.py: Environment variable loading and settings
# - exceptions.py: Error taxonomy and the JSON error shape
# - auth/: JWT verification and the admin guard
# - routers/: API endpoint definitions organized by resource
#
# The app layer is thin - it handles HTTP concerns and delegates
# business logic to the core/ package.
# =============================================================================

__version__ = "1.0.0"
