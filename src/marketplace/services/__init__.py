"""
marketplace.services

Service-layer package.

Responsibilities:
- Registration/login on top of hashing, tokens and the user repository.
- Listing operations with ownership checks before every mutation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services are plain Python and testable with in-memory repositories.
