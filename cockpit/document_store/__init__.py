"""
Document store used for aggregate read models.

Components:
- base.py - DocumentStore interface and filters
- database.py - SQLAlchemy engine and session factory
- models.py - Document table
- store.py - SQLAlchemy document store
"""
from .base import AnyFilter, DocumentFilter, DocumentStore
from .store import SqlDocumentStore

__all__ = ["AnyFilter", "DocumentFilter", "DocumentStore", "SqlDocumentStore"]
