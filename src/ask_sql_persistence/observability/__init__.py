"""
ask_sql_persistence.observability

Observability package.

Responsibilities:
- Structured logging configuration.
"""

# Package marker.
