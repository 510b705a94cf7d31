"""
marketplace.db.repositories

Repository package.

Responsibilities:
- Group data-access repositories for the persistence layer.
- Define the repository protocols shared by durable and cached variants.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories are intentionally thin; ownership rules belong in services.
