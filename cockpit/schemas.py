"""
Pydantic models for the cockpit backend.

Input records mirror the compiled event engine configuration, output records
mirror the JSON documents consumed by the cockpit UI. All models read and
write camelCase keys.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CockpitModel(BaseModel):
    """Base model with camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using wire names."""
        return self.model_dump(mode="json", by_alias=True)


# Compiled configuration

class CommandRouting(CockpitModel):
    """Routing record of one command in compiledCommandRouting."""
    aggregate_type: str = Field(..., description="Aggregate type handling the command")
    create_aggregate: bool = Field(False, description="True if the command creates a new aggregate")
    event_recorder_map: Dict[str, Any] = Field(
        default_factory=dict,
        description="Event name to recorder metadata; only the keys are used",
    )


class AggregateDescription(CockpitModel):
    """Entry of aggregateDescriptions."""
    aggregate_type: str
    aggregate_identifier: str
    aggregate_stream: Optional[str]
    aggregate_collection: Optional[str]
    multi_store_mode: Any


# Schema document

class QuerySchema(CockpitModel):
    query_name: str
    payload_schema: Any = Field(..., alias="schema")


class CommandSchema(CockpitModel):
    """Top-level command entry; routing fields default when the command is unrouted."""
    command_name: str
    payload_schema: Any = Field(..., alias="schema")
    aggregate_type: Optional[str] = None
    create_aggregate: bool = False


class AggregateCommandSchema(CockpitModel):
    command_name: str
    aggregate_type: str
    create_aggregate: bool
    payload_schema: Any = Field(..., alias="schema")


class EventSchema(CockpitModel):
    event_name: str
    payload_schema: Any = Field(..., alias="schema")


class AggregateSchema(CockpitModel):
    """One aggregate type with the commands routed to it and the events they record."""
    aggregate_type: str
    aggregate_identifier: str
    aggregate_stream: Optional[str]
    aggregate_collection: Optional[str]
    multi_store_mode: Any
    commands: List[AggregateCommandSchema] = Field(default_factory=list)
    events: List[EventSchema] = Field(default_factory=list)


class SchemaDocument(CockpitModel):
    """Aggregate-centric view of the compiled configuration."""
    aggregates: List[AggregateSchema] = Field(default_factory=list)
    queries: List[QuerySchema] = Field(default_factory=list)
    commands: List[CommandSchema] = Field(default_factory=list)
    definitions: Any = None


# Aggregate reads

class AggregateEventRecord(CockpitModel):
    """Event record returned by load-aggregate-events."""
    event_name: str
    aggregate_version: int
    created_at: str = Field(..., description="ISO 8601 timestamp with UTC offset")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    payload: Dict[str, Any] = Field(default_factory=dict)


class LoadAggregatesParams(CockpitModel):
    """Query parameters of load-aggregates."""
    aggregate_type: str
    limit: int = Field(..., ge=0)


class LoadAggregateParams(CockpitModel):
    """Query parameters of load-aggregate."""
    aggregate_type: str
    aggregate_id: str
    version: Optional[int] = Field(None, ge=0, description="Replay up to this version")


class LoadAggregateEventsParams(CockpitModel):
    """Query parameters of load-aggregate-events."""
    aggregate_type: str
    aggregate_id: str
