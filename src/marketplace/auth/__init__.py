"""
marketplace.auth

Authentication/authorization package.

Responsibilities:
- Password hashing and verification.
- Session token issuing and validation.
- Typed session claims and the `Principal` handed to services.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing here touches persistence; `services.auth_service` composes these
# primitives with the user repository.
