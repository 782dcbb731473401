"""
Event engine collaborator interface.

The cockpit never routes commands, replays aggregates or projects state itself.
It reads all of that from an EventEngine implementation supplied by the host
application.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable

from pydantic import BaseModel, Field


class AggregateEventEnvelope(BaseModel):
    """Recorded event of one aggregate instance."""
    event_name: str = Field(..., description="Event name as registered in the event map")
    aggregate_version: int = Field(..., ge=1, description="Aggregate version after this event")
    created_at: datetime = Field(..., description="Time the event was recorded")
    metadata: Dict[str, Any] = Field(default_factory=dict)
    raw_payload: Dict[str, Any] = Field(default_factory=dict, description="Event payload as stored")


class EventEngine(ABC):
    """Abstract event engine consumed by the cockpit."""

    @abstractmethod
    def compile_cacheable_config(self) -> Dict[str, Any]:
        """
        Return the compiled engine configuration.

        Must contain commandMap, queryMap, eventMap, compiledCommandRouting
        and aggregateDescriptions, each an insertion-ordered dict.
        """
        pass

    @abstractmethod
    def message_box_schema(self) -> Dict[str, Any]:
        """Return the message box JSON schema, including its definitions block."""
        pass

    @abstractmethod
    def load_aggregate_state(self, aggregate_type: str, aggregate_id: str) -> Any:
        """
        Load the current state of an aggregate.

        Args:
            aggregate_type: Aggregate type name
            aggregate_id: Aggregate identifier

        Returns:
            Aggregate state (mapping, pydantic model or object with to_dict())
        """
        pass

    @abstractmethod
    def load_aggregate_state_until(self, aggregate_type: str, aggregate_id: str, version: int) -> Any:
        """Load aggregate state by replaying events up to and including version."""
        pass

    @abstractmethod
    def load_aggregate_events(self, aggregate_type: str, aggregate_id: str) -> Iterable[AggregateEventEnvelope]:
        """Load all recorded events of an aggregate in version order."""
        pass
