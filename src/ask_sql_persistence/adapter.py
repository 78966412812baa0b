"""
ask_sql_persistence.adapter

SQL-backed persistence adapter for the Alexa Skills Kit SDK.

Responsibilities:
- Implement `AbstractPersistenceAdapter` (get/save/delete attributes).
- Lazily provision the attributes table on first use.
- Upsert with full-replace semantics; one row per partition key.
- Wrap driver failures into `AttributesStoreError`.
"""

from __future__ import annotations

from typing import Any

from ask_sdk_core.attributes_manager import AbstractPersistenceAdapter
from ask_sdk_model import RequestEnvelope
from sqlalchemy import Connection, delete, exists, inspect, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.schema import CreateTable
from sqlalchemy.sql.expression import Executable

from ask_sql_persistence.db.connection import SqlConnection, create_connection
from ask_sql_persistence.db.schema import build_attributes_table
from ask_sql_persistence.exceptions import AttributesStoreError, Operation
from ask_sql_persistence.observability.logging import get_logger
from ask_sql_persistence.partition_keygen import (
    PartitionKeyGenerator,
    keygen_by_name,
    user_id_partition_keygen,
)
from ask_sql_persistence.settings import Settings, get_settings

log = get_logger(__name__)

# Dialects with native INSERT ... ON CONFLICT support in SQLAlchemy.
_ON_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlPersistenceAdapter(AbstractPersistenceAdapter):
    """
    Stores each partition key's attributes as one JSON value in a single table.

    Every call runs the same guard sequence in one unit of work:
    connection check -> table exists? -> create if absent -> row exists? -> read/write.
    """

    def __init__(
        self,
        *,
        table_name: str,
        connection: SqlConnection,
        partition_key_name: str = "user_id",
        attributes_name: str = "attributes",
        partition_key_generator: PartitionKeyGenerator = user_id_partition_keygen,
        create_table: bool = True,
    ) -> None:
        self.table_name = table_name
        self.partition_key_name = partition_key_name
        self.attributes_name = attributes_name
        self.partition_key_generator = partition_key_generator
        self.create_table = create_table
        self.connection = connection

        self._table = build_attributes_table(
            table_name,
            partition_key_name=partition_key_name,
            attributes_name=attributes_name,
        )
        self._key_col = self._table.c[partition_key_name]
        self._attrs_col = self._table.c[attributes_name]

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        partition_key_generator: PartitionKeyGenerator | None = None,
    ) -> SqlPersistenceAdapter:
        settings = settings or get_settings()
        return cls(
            table_name=settings.table_name,
            connection=create_connection(settings),
            partition_key_name=settings.partition_key_name,
            attributes_name=settings.attributes_name,
            partition_key_generator=(
                partition_key_generator or keygen_by_name(settings.partition_keygen)
            ),
            create_table=settings.create_table,
        )

    def get_attributes(self, request_envelope: RequestEnvelope) -> dict[str, Any]:
        """Return the stored attributes, or `{}` when nothing is stored for the key."""
        key = self.partition_key_generator(request_envelope)
        try:
            self.connection.check_connection()
            with self.connection.begin() as conn:
                if not self._ensure_table(conn) or not self._row_exists(conn, key):
                    log.debug("attributes.miss", table=self.table_name, key=key)
                    return {}
                stmt = select(self._attrs_col).where(self._key_col == key)
                attributes = conn.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise self._wrap("read", key, exc) from exc

        log.debug("attributes.read", table=self.table_name, key=key)
        return attributes or {}

    def save_attributes(self, request_envelope: RequestEnvelope, attributes: dict[str, Any]) -> None:
        """Insert or fully replace the attributes stored for the key."""
        key = self.partition_key_generator(request_envelope)
        try:
            self.connection.check_connection()
            with self.connection.begin() as conn:
                # Without the table (and create_table off) the write below fails and is wrapped.
                replaced = self._ensure_table(conn) and self._row_exists(conn, key)
                self._upsert(conn, key, attributes)
        except SQLAlchemyError as exc:
            raise self._wrap("save", key, exc) from exc

        log.debug("attributes.saved", table=self.table_name, key=key, replaced=replaced)

    def delete_attributes(self, request_envelope: RequestEnvelope) -> None:
        """Remove the key's row. Missing rows (or a missing table) are a no-op."""
        key = self.partition_key_generator(request_envelope)
        try:
            self.connection.check_connection()
            with self.connection.begin() as conn:
                if not self._ensure_table(conn) or not self._row_exists(conn, key):
                    return
                conn.execute(delete(self._table).where(self._key_col == key))
        except SQLAlchemyError as exc:
            raise self._wrap("delete", key, exc) from exc

        log.debug("attributes.deleted", table=self.table_name, key=key)

    def end(self) -> None:
        self.connection.end()

    def _ensure_table(self, conn: Connection) -> bool:
        # Returns whether the table exists after provisioning.
        if inspect(conn).has_table(self.table_name):
            return True
        if not self.create_table:
            return False
        # IF NOT EXISTS: a concurrent cold start may have created it since the check above.
        conn.execute(CreateTable(self._table, if_not_exists=True))
        log.info("table.created", table=self.table_name, backend=conn.dialect.name)
        return True

    def _row_exists(self, conn: Connection, key: str) -> bool:
        stmt = select(exists().where(self._key_col == key))
        return bool(conn.execute(stmt).scalar())

    def _upsert(self, conn: Connection, key: str, attributes: dict[str, Any]) -> None:
        stmt = self._on_conflict_upsert(conn.dialect.name, key, attributes)
        if stmt is not None:
            conn.execute(stmt)
            return

        # No ON CONFLICT on this dialect: update, then insert when nothing matched.
        result = conn.execute(
            update(self._table)
            .where(self._key_col == key)
            .values({self.attributes_name: attributes})
        )
        if result.rowcount == 0:
            conn.execute(
                insert(self._table).values(
                    {self.partition_key_name: key, self.attributes_name: attributes}
                )
            )

    def _on_conflict_upsert(
        self, dialect_name: str, key: str, attributes: dict[str, Any]
    ) -> Executable | None:
        make_insert = _ON_CONFLICT_INSERTS.get(dialect_name)
        if make_insert is None:
            return None
        stmt = make_insert(self._table).values(
            {self.partition_key_name: key, self.attributes_name: attributes}
        )
        return stmt.on_conflict_do_update(
            index_elements=[self._key_col],
            set_={self.attributes_name: stmt.excluded[self.attributes_name]},
        )

    def _wrap(self, operation: Operation, key: str, exc: SQLAlchemyError) -> AttributesStoreError:
        log.error(
            "attributes.failed",
            operation=operation,
            table=self.table_name,
            key=key,
            error=str(exc),
        )
        return AttributesStoreError(
            operation=operation,
            table_name=self.table_name,
            partition_key=key,
            cause=exc,
        )


# --- Module Notes -----------------------------------------------------------
# Typical wiring in a skill:
#   adapter = SqlPersistenceAdapter.from_settings()
#   sb = CustomSkillBuilder(persistence_adapter=adapter)
