# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - utils.py: UUID normalization, value coercion, timestamps
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import (
    blank_to_none,
    macro_split_is_valid,
    normalize_uuid,
    round_half_up,
    to_number,
)

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Utils
    "blank_to_none",
    "macro_split_is_valid",
    "normalize_uuid",
    "round_half_up",
    "to_number",
]
