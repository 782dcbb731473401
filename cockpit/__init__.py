"""
Event Engine Cockpit Backend

This module exposes read-only introspection of an event-sourced aggregate system
over HTTP: the compiled message schema, persisted aggregate documents, aggregate
state and aggregate event history.

Components:
- schema_aggregator.py - Reshapes the compiled engine configuration into the cockpit schema
- facades.py - Aggregate list/state/event reads delegated to the engine and document store
- engine.py - Event engine collaborator interface
- document_store/ - Document store interface and SQLAlchemy implementation
- service.py - FastAPI application and trailing-segment routing
"""

__version__ = "0.1.0"
