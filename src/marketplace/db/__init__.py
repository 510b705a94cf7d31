"""
marketplace.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Callers above this package only ever see `db.records` types, never ORM rows.
