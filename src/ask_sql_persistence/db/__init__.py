"""
ask_sql_persistence.db

Persistence package (SQLAlchemy Core).

Responsibilities:
- Provide the attributes table definition and the connection strategies.
"""

from ask_sql_persistence.db.connection import (
    ClientConnection,
    PoolConnection,
    SqlConnection,
    create_connection,
)
from ask_sql_persistence.db.schema import build_attributes_table

__all__ = [
    "ClientConnection",
    "PoolConnection",
    "SqlConnection",
    "build_attributes_table",
    "create_connection",
]
