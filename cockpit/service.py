"""
Cockpit Service API

FastAPI service exposing the event engine schema and aggregate reads to the
cockpit UI. Operations are selected by the trailing path segment below the
configured path prefix.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Tuple, Type

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from . import __version__
from .config import CockpitSettings, get_settings, load_object
from .document_store import DocumentStore, SqlDocumentStore
from .engine import EventEngine
from .errors import ConfigurationIntegrityFault, UnknownAggregateType, UnresolvedRoute
from .facades import CockpitReader
from .schema_aggregator import compile_schema
from .schemas import LoadAggregateEventsParams, LoadAggregateParams, LoadAggregatesParams

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def handle_load_schema(reader: CockpitReader, params: None) -> Any:
    """Compile the schema for the cockpit."""
    return compile_schema(reader.event_engine).to_dict()


def handle_load_aggregates(reader: CockpitReader, params: LoadAggregatesParams) -> Any:
    """List persisted aggregates of a type from the document store."""
    return reader.list_aggregates(params.aggregate_type, params.limit)


def handle_load_aggregate(reader: CockpitReader, params: LoadAggregateParams) -> Any:
    """Load one aggregate by replaying all or some of its events."""
    return reader.load_aggregate_state(params.aggregate_type, params.aggregate_id, params.version)


def handle_load_aggregate_events(reader: CockpitReader, params: LoadAggregateEventsParams) -> Any:
    """Load all events of one aggregate."""
    events = reader.load_aggregate_events(params.aggregate_type, params.aggregate_id)
    return [event.to_dict() for event in events]


Handler = Callable[[CockpitReader, Any], Any]

# trailing path segment -> (query parameter model, handler)
HANDLERS: Dict[str, Tuple[Optional[Type[BaseModel]], Handler]] = {
    "schema": (None, handle_load_schema),
    "load-aggregates": (LoadAggregatesParams, handle_load_aggregates),
    "load-aggregate-events": (LoadAggregateEventsParams, handle_load_aggregate_events),
    "load-aggregate": (LoadAggregateParams, handle_load_aggregate),
}


def resolve_handler(path: str) -> Tuple[Optional[Type[BaseModel]], Handler]:
    """
    Resolve a request path to its handler by the trailing segment.

    Raises:
        UnresolvedRoute: Segment does not name a cockpit operation
    """
    segment = path.split("/")[-1]
    try:
        return HANDLERS[segment]
    except KeyError:
        raise UnresolvedRoute(segment) from None


def dispatch(reader: CockpitReader, path: str, query_params: Dict[str, str]) -> JSONResponse:
    """
    Run the cockpit operation for path and translate failures to HTTP errors.

    Args:
        reader: Aggregate reader bound to the engine and document store
        path: Request path below the path prefix
        query_params: Request query parameters

    Returns:
        JSON response with the operation result
    """
    try:
        params_model, handler = resolve_handler(path)
    except UnresolvedRoute as e:
        logger.warning(str(e))
        raise HTTPException(status_code=404, detail=str(e))

    params = None
    if params_model is not None:
        try:
            params = params_model.model_validate(query_params)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=jsonable_encoder(e.errors()))

    try:
        content = handler(reader, params)
    except UnknownAggregateType as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConfigurationIntegrityFault as e:
        logger.error(f"Configuration integrity fault: {e}")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.exception(f"Cockpit request {path} failed: {e}")
        raise HTTPException(status_code=500, detail="Cockpit request failed")

    return JSONResponse(content=content)


def create_app(
    event_engine: EventEngine,
    document_store: DocumentStore,
    settings: Optional[CockpitSettings] = None
) -> FastAPI:
    """
    Create the cockpit FastAPI application.

    Args:
        event_engine: Engine providing configuration and aggregate replay
        document_store: Store holding aggregate read models
        settings: Service settings, loaded from the environment if omitted

    Returns:
        FastAPI application
    """
    settings = settings or get_settings()
    reader = CockpitReader(event_engine, document_store)

    app = FastAPI(
        title="Event Engine Cockpit Backend",
        description="Inspect the compiled message schema, aggregate documents, state and event history",
        version=__version__
    )
    app.state.settings = settings
    app.state.reader = reader

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "service": settings.service_name,
            "version": __version__,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

    @app.get(settings.path_prefix.rstrip("/") + "/{path:path}")
    def handle(path: str, request: Request):
        """Dispatch a cockpit request by its trailing path segment."""
        return dispatch(reader, path, dict(request.query_params))

    logger.info(f"Cockpit routes mounted below {settings.path_prefix or '/'}")
    return app


def app_factory() -> FastAPI:
    """
    Build the application from environment settings.

    The event engine is imported from COCKPIT_EVENT_ENGINE and the document
    store is created from COCKPIT_DATABASE_URL.
    """
    settings = get_settings()
    if not settings.event_engine:
        raise RuntimeError("COCKPIT_EVENT_ENGINE must name the event engine, e.g. 'myapp.engine:event_engine'")

    event_engine = load_object(settings.event_engine)
    if not isinstance(event_engine, EventEngine) and callable(event_engine):
        event_engine = event_engine()
    if not isinstance(event_engine, EventEngine):
        raise TypeError(f"{settings.event_engine} is not an EventEngine")

    document_store = SqlDocumentStore.from_url(settings.database_url, echo=settings.database_echo)
    return create_app(event_engine, document_store, settings)


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "cockpit.service:app_factory",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="info" if settings.debug else "warning"
    )
