"""Document-shaped persistence used by the trivia services.

The services only rely on three capabilities: fetch a document by id, write a
whole document, and run a filtered, sorted, limited query over a collection.
Any storage engine providing those can stand in for the in-memory store.
"""

from __future__ import annotations

import copy
from threading import Lock
from typing import Any, Callable, Iterable, Protocol

Document = dict[str, Any]
Predicate = Callable[[Document], bool]
SortSpec = Iterable[tuple[str, bool]]

SESSIONS = "game_sessions"
USERS = "users"


class DocumentStore(Protocol):
    """Durable store keyed by document id."""

    def get(self, collection: str, document_id: str) -> Document | None: ...

    def put(self, collection: str, document_id: str, document: Document) -> None: ...

    def find(
        self,
        collection: str,
        where: Predicate | None = None,
        sort: SortSpec = (),
        limit: int | None = None,
    ) -> list[Document]: ...


class InMemoryDocumentStore:
    """Process-local store holding deep copies of every document."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, Document]] = {}
        self._lock = Lock()

    def get(self, collection: str, document_id: str) -> Document | None:
        with self._lock:
            document = self._collections.get(collection, {}).get(document_id)
            return copy.deepcopy(document) if document is not None else None

    def put(self, collection: str, document_id: str, document: Document) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[document_id] = copy.deepcopy(document)

    def find(
        self,
        collection: str,
        where: Predicate | None = None,
        sort: SortSpec = (),
        limit: int | None = None,
    ) -> list[Document]:
        """Return matching documents ordered by ``sort`` (field, descending) pairs."""
        with self._lock:
            documents = list(self._collections.get(collection, {}).values())
        if where is not None:
            documents = [doc for doc in documents if where(doc)]
        # Stable sorts applied from the least significant key upwards.
        for field_name, descending in reversed(list(sort)):
            documents.sort(key=_sort_key(field_name), reverse=descending)
        if limit is not None:
            documents = documents[:limit]
        return [copy.deepcopy(doc) for doc in documents]

    def count(self, collection: str) -> int:
        with self._lock:
            return len(self._collections.get(collection, {}))


def _sort_key(field_name: str) -> Callable[[Document], tuple[bool, Any]]:
    # Missing and None values order before any real value.
    def key(document: Document) -> tuple[bool, Any]:
        value = document.get(field_name)
        return (value is not None, value)

    return key
