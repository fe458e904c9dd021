"""Lookup contracts for study material that lives outside this service.

Curated resources and uploaded documents are owned by other systems. The
hierarchy only needs to confirm an id exists and borrow a display title, so
each collaborator is a narrow Protocol. The in-memory implementations back
development and tests; deployments swap them through the FastAPI
dependencies ``get_resource_catalog`` / ``get_document_catalog``.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Protocol, Tuple


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    title: str


class ResourceCatalog(Protocol):
    def get(self, resource_id: str) -> Optional[CatalogEntry]:
        """Return the curated resource, or None when it does not exist."""


class DocumentCatalog(Protocol):
    def get(self, owner_id: str, document_id: str) -> Optional[CatalogEntry]:
        """Return the owner's document, or None when missing or foreign."""


class InMemoryResourceCatalog:
    """Resource catalog held in a dict."""

    def __init__(self, entries: Iterable[CatalogEntry] = ()):
        self._entries: Dict[str, CatalogEntry] = {e.id: e for e in entries}

    def add(self, entry: CatalogEntry) -> None:
        self._entries[entry.id] = entry

    def get(self, resource_id: str) -> Optional[CatalogEntry]:
        return self._entries.get(resource_id)


class InMemoryDocumentCatalog:
    """Document catalog keyed by (owner, document id)."""

    def __init__(self):
        self._entries: Dict[Tuple[str, str], CatalogEntry] = {}

    def add(self, owner_id: str, entry: CatalogEntry) -> None:
        self._entries[(owner_id, entry.id)] = entry

    def get(self, owner_id: str, document_id: str) -> Optional[CatalogEntry]:
        return self._entries.get((owner_id, document_id))


_resource_catalog = InMemoryResourceCatalog()
_document_catalog = InMemoryDocumentCatalog()


def get_resource_catalog() -> ResourceCatalog:
    return _resource_catalog


def get_document_catalog() -> DocumentCatalog:
    return _document_catalog
