"""
marketplace.cache

Read-through caching package (Redis).

Responsibilities:
- Thin async cache client with a distinguishable miss signal.
- Caching decorator for the listing repository.
"""

# Package marker.
