"""
marketplace.api

API package for the marketplace service.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, request/response models and error rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + auth + delegation to services.
