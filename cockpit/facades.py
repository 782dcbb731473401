"""
Aggregate read facades.

Each read validates the aggregate type against the compiled configuration
before touching the event engine or document store.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from .document_store import AnyFilter, DocumentStore
from .engine import EventEngine
from .errors import ConfigurationIntegrityFault, UnknownAggregateType
from .schema_aggregator import parse_aggregate_description
from .schemas import AggregateDescription, AggregateEventRecord

logger = logging.getLogger(__name__)


def format_created_at(created_at: datetime) -> str:
    """Format a timestamp as ISO 8601 with second precision and UTC offset."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.isoformat(timespec="seconds")


def state_to_dict(state: Any) -> Dict[str, Any]:
    """Normalize an aggregate state returned by the engine to a JSON object."""
    if isinstance(state, BaseModel):
        return state.model_dump(mode="json", by_alias=True)
    if hasattr(state, "to_dict"):
        return state.to_dict()
    if isinstance(state, dict):
        return state
    raise TypeError(f"Cannot convert aggregate state of type {type(state).__name__} to a JSON object")


class CockpitReader:
    """Read access to aggregates for the cockpit."""

    def __init__(self, event_engine: EventEngine, document_store: DocumentStore):
        self.event_engine = event_engine
        self.document_store = document_store

    def aggregate_description(self, aggregate_type: str) -> AggregateDescription:
        """
        Look up the description of an aggregate type.

        Raises:
            UnknownAggregateType: Type is not in aggregateDescriptions
        """
        config = self.event_engine.compile_cacheable_config()
        descriptions = config.get("aggregateDescriptions")
        if descriptions is None:
            raise ConfigurationIntegrityFault("Compiled configuration is missing aggregateDescriptions")

        if aggregate_type not in descriptions:
            raise UnknownAggregateType(aggregate_type)

        return parse_aggregate_description(aggregate_type, descriptions[aggregate_type])

    def list_aggregates(self, aggregate_type: str, limit: int) -> List[Dict[str, Any]]:
        """
        List persisted aggregate documents of a type.

        Args:
            aggregate_type: Aggregate type name
            limit: Maximum number of documents

        Returns:
            Documents from the aggregate's collection
        """
        description = self.aggregate_description(aggregate_type)

        if description.aggregate_collection is None:
            raise ConfigurationIntegrityFault(
                f"Aggregate {aggregate_type} has no aggregate collection"
            )

        documents = list(self.document_store.filter_docs(
            description.aggregate_collection, AnyFilter(), 0, limit
        ))
        logger.info(f"Loaded {len(documents)} {aggregate_type} documents from {description.aggregate_collection}")
        return documents

    def load_aggregate_state(
        self,
        aggregate_type: str,
        aggregate_id: str,
        version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Load aggregate state, current or as of a version.

        Args:
            aggregate_type: Aggregate type name
            aggregate_id: Aggregate identifier
            version: Replay up to this version; None for current state

        Returns:
            Aggregate state as a JSON object
        """
        self.aggregate_description(aggregate_type)

        if version is None:
            state = self.event_engine.load_aggregate_state(aggregate_type, aggregate_id)
        else:
            state = self.event_engine.load_aggregate_state_until(aggregate_type, aggregate_id, version)

        return state_to_dict(state)

    def load_aggregate_events(self, aggregate_type: str, aggregate_id: str) -> List[AggregateEventRecord]:
        """Load the event history of an aggregate."""
        self.aggregate_description(aggregate_type)

        events = []
        for event in self.event_engine.load_aggregate_events(aggregate_type, aggregate_id):
            events.append(AggregateEventRecord(
                event_name=event.event_name,
                aggregate_version=event.aggregate_version,
                created_at=format_created_at(event.created_at),
                metadata=event.metadata,
                payload=event.raw_payload,
            ))

        logger.info(f"Loaded {len(events)} events of {aggregate_type} {aggregate_id}")
        return events
