"""
Base classes for document stores.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional


class DocumentFilter(ABC):
    """Filter applied to documents of a collection."""

    @abstractmethod
    def match(self, doc: Dict[str, Any]) -> bool:
        """Return True if the document passes the filter."""
        pass


class AnyFilter(DocumentFilter):
    """Matches every document."""

    def match(self, doc: Dict[str, Any]) -> bool:
        return True

    def __repr__(self):
        return "AnyFilter()"


class DocumentStore(ABC):
    """Abstract base class for read-model document stores."""

    @abstractmethod
    def filter_docs(
        self,
        collection: str,
        filter: DocumentFilter,
        skip: int = 0,
        limit: Optional[int] = None
    ) -> Iterator[Dict[str, Any]]:
        """
        Iterate documents of a collection matching filter.

        Args:
            collection: Collection name
            filter: Document filter
            skip: Number of matching documents to skip
            limit: Maximum number of documents, None for all

        Returns:
            Iterator of documents in insertion order
        """
        pass

