"""
SQLAlchemy-backed document store.
"""
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .base import AnyFilter, DocumentFilter, DocumentStore
from .database import create_db_engine, create_session_factory, create_tables
from .models import Document

logger = logging.getLogger(__name__)


class SqlDocumentStore(DocumentStore):
    """Stores JSON documents in a single SQL table, one row per document."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self.SessionLocal = create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str, echo: bool = False) -> "SqlDocumentStore":
        """Create a store for a database URL and ensure its tables exist."""
        store = cls(create_db_engine(database_url, echo=echo))
        store.create_tables()
        return store

    def create_tables(self):
        create_tables(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def _get(self, db: Session, collection: str, doc_id: str) -> Optional[Document]:
        return (
            db.query(Document)
            .filter(Document.collection == collection, Document.doc_id == doc_id)
            .first()
        )

    def filter_docs(
        self,
        collection: str,
        filter: DocumentFilter,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> Iterator[Dict[str, Any]]:
        with self._session() as db:
            query = (
                db.query(Document)
                .filter(Document.collection == collection)
                .order_by(Document.id)
            )

            if isinstance(filter, AnyFilter):
                # Pagination can be pushed down to SQL
                if skip:
                    query = query.offset(skip)
                if limit is not None:
                    query = query.limit(limit)
                docs = [row.doc for row in query.all()]
            else:
                matching = [row.doc for row in query.all() if filter.match(row.doc)]
                end = skip + limit if limit is not None else None
                docs = matching[skip:end]

        logger.debug(f"Loaded {len(docs)} documents from {collection} with {filter!r}")
        return iter(docs)

    def add_doc(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> None:
        """Add a new document; fails if doc_id already exists in the collection."""
        with self._session() as db:
            if self._get(db, collection, doc_id) is not None:
                raise ValueError(f"Document {doc_id} already exists in {collection}")
            db.add(Document(collection=collection, doc_id=doc_id, doc=doc))
            db.commit()

    def upsert_doc(self, collection: str, doc_id: str, doc: Dict[str, Any]) -> None:
        """Insert or replace a document."""
        with self._session() as db:
            existing = self._get(db, collection, doc_id)
            if existing is None:
                db.add(Document(collection=collection, doc_id=doc_id, doc=doc))
            else:
                existing.doc = doc
            db.commit()

    def get_doc(self, collection: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """Get a document by id."""
        with self._session() as db:
            document = self._get(db, collection, doc_id)
            return document.doc if document else None

    def delete_doc(self, collection: str, doc_id: str) -> bool:
        """Delete a document by id. Returns False if it did not exist."""
        with self._session() as db:
            document = self._get(db, collection, doc_id)
            if document is None:
                return False
            db.delete(document)
            db.commit()
            return True

    def has_collection(self, collection: str) -> bool:
        """Return True if the collection holds at least one document."""
        with self._session() as db:
            return (
                db.query(Document.id)
                .filter(Document.collection == collection)
                .first()
            ) is not None
