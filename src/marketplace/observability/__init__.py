"""
marketplace.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation and per-request deadlines.
"""

# Package marker.
