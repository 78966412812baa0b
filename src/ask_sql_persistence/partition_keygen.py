"""
ask_sql_persistence.partition_keygen

Partition key generators: derive the attributes row key from a request envelope.

Responsibilities:
- Extract user id, device id, or person id (falling back to user id).
- Fail with the host SDK's `PersistenceException` when the id is absent.
"""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace

from ask_sdk_core.exceptions import PersistenceException
from ask_sdk_model import RequestEnvelope

PartitionKeyGenerator = Callable[[RequestEnvelope], str]


def user_id_partition_keygen(request_envelope: RequestEnvelope) -> str:
    """Use `context.system.user.user_id` as the partition key."""
    try:
        user_id = request_envelope.context.system.user.user_id
    except AttributeError:
        user_id = None
    if not user_id:
        raise PersistenceException("Cannot retrieve user id from request envelope!")
    return user_id


def device_id_partition_keygen(request_envelope: RequestEnvelope) -> str:
    """Use `context.system.device.device_id` as the partition key."""
    try:
        device_id = request_envelope.context.system.device.device_id
    except AttributeError:
        device_id = None
    if not device_id:
        raise PersistenceException("Cannot retrieve device id from request envelope!")
    return device_id


def person_id_partition_keygen(request_envelope: RequestEnvelope) -> str:
    """
    Use the recognized speaker's `person_id`; fall back to the user id when the
    request carries no person (speaker not recognized or feature disabled).
    """
    try:
        person_id = request_envelope.context.system.person.person_id
    except AttributeError:
        person_id = None
    if person_id:
        return person_id
    return user_id_partition_keygen(request_envelope)


# Lookup by the names used in settings (`ASK_SQL_PARTITION_KEYGEN`).
PartitionKeyGenerators = SimpleNamespace(
    user_id=user_id_partition_keygen,
    device_id=device_id_partition_keygen,
    person_id=person_id_partition_keygen,
)


def keygen_by_name(name: str) -> PartitionKeyGenerator:
    try:
        return getattr(PartitionKeyGenerators, name)
    except AttributeError:
        raise ValueError(f"unknown partition key generator: {name!r}") from None
