"""
Shared fixtures: an in-memory event engine and an in-memory SQLite document store.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List

import pytest

from cockpit.config import CockpitSettings
from cockpit.document_store import SqlDocumentStore
from cockpit.engine import AggregateEventEnvelope, EventEngine


USER_SCHEMA = {
    "type": "object",
    "properties": {"userId": {"type": "string"}, "username": {"type": "string"}},
    "required": ["userId", "username"],
}
USERNAME_SCHEMA = {
    "type": "object",
    "properties": {"userId": {"type": "string"}, "username": {"type": "string"}},
}
BUILDING_SCHEMA = {
    "type": "object",
    "properties": {"buildingId": {"type": "string"}, "name": {"type": "string"}},
}


def make_config() -> Dict[str, Any]:
    """Compiled configuration with two aggregates, one unrouted command and a shared event."""
    return {
        "commandMap": {
            "RegisterUser": USER_SCHEMA,
            "ChangeUsername": USERNAME_SCHEMA,
            "AddBuilding": BUILDING_SCHEMA,
            "SendPing": {"type": "object"},
        },
        "queryMap": {
            "GetUser": {"type": "object", "properties": {"userId": {"type": "string"}}},
            "GetUsers": {"type": "object"},
        },
        "eventMap": {
            "UserWasRegistered": USER_SCHEMA,
            "UsernameWasChanged": USERNAME_SCHEMA,
            "UserWasTouched": {"type": "object"},
            "BuildingAdded": BUILDING_SCHEMA,
        },
        "compiledCommandRouting": {
            "RegisterUser": {
                "commandName": "RegisterUser",
                "aggregateType": "User",
                "createAggregate": True,
                "eventRecorderMap": {"UserWasRegistered": {}, "UserWasTouched": {}},
            },
            "AddBuilding": {
                "commandName": "AddBuilding",
                "aggregateType": "Building",
                "createAggregate": True,
                "eventRecorderMap": {"BuildingAdded": {}},
            },
            "ChangeUsername": {
                "commandName": "ChangeUsername",
                "aggregateType": "User",
                "createAggregate": False,
                "eventRecorderMap": {"UserWasTouched": {}, "UsernameWasChanged": {}},
            },
        },
        "aggregateDescriptions": {
            "User": {
                "aggregateType": "User",
                "aggregateIdentifier": "userId",
                "aggregateStream": "event_stream",
                "aggregateCollection": "users",
                "multiStoreMode": None,
            },
            "Building": {
                "aggregateType": "Building",
                "aggregateIdentifier": "buildingId",
                "aggregateStream": "event_stream",
                "aggregateCollection": "buildings",
                "multiStoreMode": "mode_e_s",
            },
        },
    }


DEFINITIONS = {"UserId": {"type": "string", "pattern": "^[a-f0-9-]{36}$"}}


class InMemoryEventEngine(EventEngine):
    """Event engine double holding config, states and events in dicts."""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.events: Dict[tuple, List[AggregateEventEnvelope]] = {}
        self.calls: List[tuple] = []

    def compile_cacheable_config(self) -> Dict[str, Any]:
        return self.config

    def message_box_schema(self) -> Dict[str, Any]:
        return {"type": "object", "definitions": DEFINITIONS}

    def record(self, aggregate_type: str, aggregate_id: str, event_name: str, payload: Dict[str, Any]):
        stream = self.events.setdefault((aggregate_type, aggregate_id), [])
        stream.append(AggregateEventEnvelope(
            event_name=event_name,
            aggregate_version=len(stream) + 1,
            created_at=datetime(2024, 1, 15, 10, 30, len(stream), tzinfo=timezone.utc),
            metadata={"_causation_name": event_name},
            raw_payload=payload,
        ))

    def _replay(self, aggregate_type: str, aggregate_id: str, version: int = None) -> Dict[str, Any]:
        state: Dict[str, Any] = {}
        for event in self.events.get((aggregate_type, aggregate_id), []):
            if version is not None and event.aggregate_version > version:
                break
            state.update(event.raw_payload)
        return state

    def load_aggregate_state(self, aggregate_type: str, aggregate_id: str) -> Any:
        self.calls.append(("load_aggregate_state", aggregate_type, aggregate_id))
        return self._replay(aggregate_type, aggregate_id)

    def load_aggregate_state_until(self, aggregate_type: str, aggregate_id: str, version: int) -> Any:
        self.calls.append(("load_aggregate_state_until", aggregate_type, aggregate_id, version))
        return self._replay(aggregate_type, aggregate_id, version)

    def load_aggregate_events(self, aggregate_type: str, aggregate_id: str) -> Iterable[AggregateEventEnvelope]:
        self.calls.append(("load_aggregate_events", aggregate_type, aggregate_id))
        return iter(self.events.get((aggregate_type, aggregate_id), []))


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def event_engine(config):
    engine = InMemoryEventEngine(config)
    engine.record("User", "u-1", "UserWasRegistered", {"userId": "u-1", "username": "alice"})
    engine.record("User", "u-1", "UsernameWasChanged", {"userId": "u-1", "username": "alicia"})
    return engine


@pytest.fixture
def document_store():
    store = SqlDocumentStore.from_url("sqlite://")
    yield store
    store.engine.dispose()


@pytest.fixture
def settings():
    return CockpitSettings(path_prefix="/api/ee-cockpit", service_name="ee-cockpit-test")
