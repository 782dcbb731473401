"""
Schema aggregation for the cockpit.

Takes the flat compiled event engine configuration and reshapes it into an
aggregate-centric schema document: every aggregate type with the commands
routed to it and the de-duplicated events those commands record.
"""
import logging
from typing import Any, Callable, Dict, List, Mapping, TypeVar

from pydantic import ValidationError

from .engine import EventEngine
from .errors import ConfigurationIntegrityFault
from .schemas import (
    AggregateCommandSchema, AggregateDescription, AggregateSchema, CommandRouting,
    CommandSchema, EventSchema, QuerySchema, SchemaDocument,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIG_KEYS = (
    "commandMap",
    "queryMap",
    "eventMap",
    "compiledCommandRouting",
    "aggregateDescriptions",
)


def map_with_key(func: Callable[[str, Any], T], mapping: Mapping[str, Any]) -> List[T]:
    """
    Apply func to every (key, value) entry of mapping.

    Args:
        func: Callable receiving key and value
        mapping: Insertion-ordered mapping

    Returns:
        Results in the mapping's iteration order
    """
    return [func(key, value) for key, value in mapping.items()]


def _lookup_schema(schema_map: Mapping[str, Any], name: str, kind: str, aggregate_type: str) -> Any:
    try:
        return schema_map[name]
    except KeyError:
        raise ConfigurationIntegrityFault(
            f"{kind} {name} is routed to aggregate {aggregate_type} "
            f"but missing from the {kind.lower()} map"
        ) from None


def _parse_routing(compiled_command_routing: Mapping[str, Any]) -> Dict[str, CommandRouting]:
    routing = {}
    for command_name, raw in compiled_command_routing.items():
        try:
            routing[command_name] = CommandRouting.model_validate(raw)
        except ValidationError as e:
            raise ConfigurationIntegrityFault(
                f"Invalid routing for command {command_name}: {e}"
            ) from e
    return routing


def parse_aggregate_description(aggregate_name: str, raw: Any) -> AggregateDescription:
    """Validate one aggregateDescriptions entry."""
    try:
        return AggregateDescription.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationIntegrityFault(
            f"Invalid description for aggregate {aggregate_name}: {e}"
        ) from e


def _aggregate_events(
    routes: Mapping[str, CommandRouting],
    event_map: Mapping[str, Any],
    aggregate_type: str,
) -> List[EventSchema]:
    # keyed by event name, first occurrence wins
    events: Dict[str, EventSchema] = {}
    for routing in routes.values():
        for event_name in routing.event_recorder_map:
            if event_name in events:
                continue
            events[event_name] = EventSchema(
                event_name=event_name,
                payload_schema=_lookup_schema(event_map, event_name, "Event", aggregate_type),
            )
    return list(events.values())


def _aggregate_schema(
    description: AggregateDescription,
    routing: Mapping[str, CommandRouting],
    command_map: Mapping[str, Any],
    event_map: Mapping[str, Any],
) -> AggregateSchema:
    aggregate_type = description.aggregate_type
    routes = {
        command_name: command_routing
        for command_name, command_routing in routing.items()
        if command_routing.aggregate_type == aggregate_type
    }

    commands = map_with_key(
        lambda command_name, command_routing: AggregateCommandSchema(
            command_name=command_name,
            aggregate_type=command_routing.aggregate_type,
            create_aggregate=command_routing.create_aggregate,
            payload_schema=_lookup_schema(command_map, command_name, "Command", aggregate_type),
        ),
        routes,
    )

    return AggregateSchema(
        aggregate_type=description.aggregate_type,
        aggregate_identifier=description.aggregate_identifier,
        aggregate_stream=description.aggregate_stream,
        aggregate_collection=description.aggregate_collection,
        multi_store_mode=description.multi_store_mode,
        commands=commands,
        events=_aggregate_events(routes, event_map, aggregate_type),
    )


def build_schema_document(
    command_map: Mapping[str, Any],
    query_map: Mapping[str, Any],
    event_map: Mapping[str, Any],
    compiled_command_routing: Mapping[str, Any],
    aggregate_descriptions: Mapping[str, Any],
    definitions: Any,
) -> SchemaDocument:
    """
    Build the cockpit schema document from compiled configuration maps.

    Payload schemas and definitions are passed through untouched. Ordering
    follows the iteration order of the input maps.

    Args:
        command_map: Command name to payload schema
        query_map: Query name to payload schema
        event_map: Event name to payload schema
        compiled_command_routing: Command name to routing record
        aggregate_descriptions: Aggregate type to description record
        definitions: Message box schema definitions block

    Returns:
        SchemaDocument

    Raises:
        ConfigurationIntegrityFault: A routed command or event has no schema,
            or a routing/description record is malformed
    """
    routing = _parse_routing(compiled_command_routing)

    queries = map_with_key(
        lambda query_name, schema: QuerySchema(query_name=query_name, payload_schema=schema),
        query_map,
    )

    def command_entry(command_name: str, schema: Any) -> CommandSchema:
        command_routing = routing.get(command_name)
        if command_routing is None:
            return CommandSchema(command_name=command_name, payload_schema=schema)
        return CommandSchema(
            command_name=command_name,
            payload_schema=schema,
            aggregate_type=command_routing.aggregate_type,
            create_aggregate=command_routing.create_aggregate,
        )

    commands = map_with_key(command_entry, command_map)

    descriptions = [
        parse_aggregate_description(aggregate_name, raw)
        for aggregate_name, raw in aggregate_descriptions.items()
    ]
    aggregates = [
        _aggregate_schema(description, routing, command_map, event_map)
        for description in descriptions
    ]

    known_types = {description.aggregate_type for description in descriptions}
    for command_name, command_routing in routing.items():
        if command_routing.aggregate_type not in known_types:
            logger.warning(
                f"Command {command_name} is routed to undescribed aggregate type "
                f"{command_routing.aggregate_type}"
            )
            # unassigned routes must still resolve their schemas
            _lookup_schema(command_map, command_name, "Command", command_routing.aggregate_type)
            for event_name in command_routing.event_recorder_map:
                _lookup_schema(event_map, event_name, "Event", command_routing.aggregate_type)

    return SchemaDocument(
        aggregates=aggregates,
        queries=queries,
        commands=commands,
        definitions=definitions,
    )


def compile_schema(event_engine: EventEngine) -> SchemaDocument:
    """
    Compile the cockpit schema from the engine's current configuration.

    Args:
        event_engine: Engine providing compiled config and message box schema

    Returns:
        SchemaDocument
    """
    config = event_engine.compile_cacheable_config()
    missing = [key for key in CONFIG_KEYS if key not in config]
    if missing:
        raise ConfigurationIntegrityFault(
            f"Compiled configuration is missing {', '.join(missing)}"
        )

    message_box_schema = event_engine.message_box_schema() or {}
    definitions = message_box_schema.get("definitions")
    if definitions is None:
        logger.warning("Message box schema has no definitions block")

    document = build_schema_document(
        command_map=config["commandMap"],
        query_map=config["queryMap"],
        event_map=config["eventMap"],
        compiled_command_routing=config["compiledCommandRouting"],
        aggregate_descriptions=config["aggregateDescriptions"],
        definitions=definitions,
    )

    logger.info(
        f"Compiled cockpit schema: {len(document.aggregates)} aggregates, "
        f"{len(document.commands)} commands, {len(document.queries)} queries"
    )
    return document
