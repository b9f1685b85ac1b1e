"""
Application constants for the Bearded issues service.

Error messages returned to clients live here so that handlers and tests
agree on them.
"""

# =============================================================================
# Error Messages
# =============================================================================

WRONG_ENTITY = "Wrong entity"
WRONG_ID = "Wrong id format"
VALIDATION_ERROR = "Validation error"
NOT_FOUND = "Not found"
DUPLICATE = "Duplicate"
FORBIDDEN = "Forbidden"
NOT_AUTHENTICATED = "Not authenticated"
DB_ERROR = "Database error"
INTERNAL_ERROR = "Internal server error"

TARGET_WRONG = "Target is wrong"
TARGET_NOT_FOUND = "Target not found"
TEXT_REQUIRED = "Text is required"

# =============================================================================
# Listing
# =============================================================================

# Fields accepted by the issue list ``ordering`` parameter
ISSUE_SORT_FIELDS = ("created", "updated")

# =============================================================================
# Identifiers
# =============================================================================

# Largest value an Integer primary key column holds on every supported backend
MAX_ID = 2**31 - 1
