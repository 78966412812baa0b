"""
ask_sql_persistence.exceptions

Domain-specific exceptions raised by the persistence adapter.

Responsibilities:
- Wrap driver-level failures with the operation, table and partition key involved.
- Stay catchable as the host SDK's `PersistenceException`.
"""

from __future__ import annotations

from typing import Literal

from ask_sdk_core.exceptions import PersistenceException

Operation = Literal["read", "save", "delete"]

_MESSAGES: dict[str, str] = {
    "read": "Could not read item ({key}) from table ({table}): {cause}",
    "save": "Could not save item ({key}) on table ({table}): {cause}",
    "delete": "Could not delete item ({key}) from table ({table}): {cause}",
}


class AttributesStoreError(PersistenceException):
    """
    Raised when connect, schema check or query fails for an attributes operation.
    The original driver error is chained as `__cause__`.
    """

    def __init__(
        self,
        *,
        operation: Operation,
        table_name: str,
        partition_key: str,
        cause: BaseException,
    ) -> None:
        self.operation = operation
        self.table_name = table_name
        self.partition_key = partition_key
        super().__init__(
            _MESSAGES[operation].format(key=partition_key, table=table_name, cause=cause)
        )


# --- Module Notes -----------------------------------------------------------
# Single error type: transient and fatal failures look the same to callers, and
# nothing here retries.
