"""
ask_sql_persistence

SQL persistence adapter for Alexa skills built on `ask-sdk-core`.

Responsibilities:
- Expose the adapter, connection strategies and partition key generators.
- Expose package version metadata.
"""

from ask_sql_persistence.adapter import SqlPersistenceAdapter
from ask_sql_persistence.db.connection import ClientConnection, PoolConnection, SqlConnection
from ask_sql_persistence.exceptions import AttributesStoreError
from ask_sql_persistence.partition_keygen import (
    PartitionKeyGenerator,
    PartitionKeyGenerators,
    device_id_partition_keygen,
    person_id_partition_keygen,
    user_id_partition_keygen,
)

__all__ = [
    "AttributesStoreError",
    "ClientConnection",
    "PartitionKeyGenerator",
    "PartitionKeyGenerators",
    "PoolConnection",
    "SqlConnection",
    "SqlPersistenceAdapter",
    "__version__",
    "device_id_partition_keygen",
    "person_id_partition_keygen",
    "user_id_partition_keygen",
]

__version__ = "0.1.0"
