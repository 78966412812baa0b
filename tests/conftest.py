"""
tests.conftest

Shared fixtures: mock request envelopes and adapters over both connection strategies.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from ask_sdk_model import Application, Context, Device, RequestEnvelope, User
from ask_sdk_model.interfaces.system import SystemState
from ask_sdk_model.person import Person

from ask_sql_persistence.adapter import SqlPersistenceAdapter
from ask_sql_persistence.db.connection import ClientConnection, PoolConnection, SqlConnection

USER_ID = "amzn1.ask.account.TESTUSER"
DEVICE_ID = "amzn1.ask.device.TESTDEVICE"
PERSON_ID = "amzn1.ask.person.TESTPERSON"
APPLICATION_ID = "amzn1.ask.skill.TESTSKILL"


def make_envelope(
    *,
    user_id: str | None = USER_ID,
    device_id: str | None = DEVICE_ID,
    person_id: str | None = None,
) -> RequestEnvelope:
    system = SystemState(
        application=Application(application_id=APPLICATION_ID),
        user=User(user_id=user_id) if user_id is not None else None,
        device=Device(device_id=device_id) if device_id is not None else None,
        person=Person(person_id=person_id) if person_id is not None else None,
        api_endpoint="https://api.amazonalexa.com",
    )
    return RequestEnvelope(version="1.0", context=Context(system=system))


@pytest.fixture
def envelope() -> RequestEnvelope:
    return make_envelope()


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    # File-backed so pooled connections see the same database.
    return f"sqlite:///{tmp_path / 'attributes.db'}"


def _make_connection(mode: str, url: str) -> SqlConnection:
    if mode == "client":
        return ClientConnection(url)
    return PoolConnection(url)


@pytest.fixture(params=["client", "pool"])
def connection(request, sqlite_url) -> Iterator[SqlConnection]:
    conn = _make_connection(request.param, sqlite_url)
    yield conn
    conn.end()


@pytest.fixture
def adapter(connection) -> SqlPersistenceAdapter:
    return SqlPersistenceAdapter(
        table_name="test_attributes",
        partition_key_name="aws_id",
        connection=connection,
    )


@pytest.fixture(params=["client", "pool"])
def postgres_connection(request) -> Iterator[SqlConnection]:
    # Live database suite; e.g. ASK_SQL_TEST_DATABASE_URL=postgresql+psycopg://user:pw@host/db
    url = os.environ.get("ASK_SQL_TEST_DATABASE_URL")
    if not url:
        pytest.skip("ASK_SQL_TEST_DATABASE_URL not set")
    conn = _make_connection(request.param, url)
    yield conn
    conn.end()


# --- Module Notes -----------------------------------------------------------
# The client/pool parametrization makes every adapter test run once per strategy.
