"""
Database models for the document store.
"""
from sqlalchemy import Column, DateTime, Integer, JSON, String, UniqueConstraint
from sqlalchemy.sql import func

from .database import Base


class Document(Base):
    """JSON document of a read-model collection."""

    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("collection", "doc_id", name="uq_documents_collection_doc_id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)  # Insertion order
    collection = Column(String(255), nullable=False, index=True)  # e.g., "users"
    doc_id = Column(String(255), nullable=False)  # Aggregate identifier
    doc = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Document(collection='{self.collection}', doc_id='{self.doc_id}')>"
