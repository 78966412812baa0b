"""
ask_sql_persistence.db.schema

Attributes table definition.

Responsibilities:
- Build the single-table schema: partition key (primary key) + JSON attributes.
"""

from __future__ import annotations

from sqlalchemy import JSON, Column, MetaData, String, Table
from sqlalchemy.dialects.postgresql import JSONB

# Alexa user ids ("amzn1.ask.account.<...>") run past 200 characters.
PARTITION_KEY_LENGTH = 512


def build_attributes_table(
    table_name: str,
    *,
    partition_key_name: str = "user_id",
    attributes_name: str = "attributes",
    metadata: MetaData | None = None,
) -> Table:
    """
    The primary key gives the "one row per partition key" guarantee and is the
    conflict target for upserts.
    """

    return Table(
        table_name,
        metadata if metadata is not None else MetaData(),
        Column(partition_key_name, String(PARTITION_KEY_LENGTH), primary_key=True),
        Column(attributes_name, JSON().with_variant(JSONB(), "postgresql"), nullable=False),
    )


# --- Module Notes -----------------------------------------------------------
# Names come from adapter configuration, so the table is built at runtime instead
# of through a declarative model class.
