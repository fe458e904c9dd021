"""Base repository with shared owner-scoped get-by-ID patterns.

Every study entity is reachable only through a workspace owned by the caller.
Subclasses specify model_class, id_prefix and not_found_error and implement
``_owned_query``; the base provides lookups that treat "missing" and
"owned by someone else" identically.

Repositories flush but never commit: the service layer owns the transaction.
"""

import uuid
from typing import TypeVar, Generic, Optional, Type

from sqlalchemy.orm import Session, Query

from ..database import Base
from ..exceptions import NotFoundError

ModelT = TypeVar("ModelT", bound=Base)


def generate_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


class BaseRepository(Generic[ModelT]):
    """Shared repository logic for SQLAlchemy models.

    Class variables to set in subclasses:
        model_class:     The SQLAlchemy model (e.g., StudyItem)
        id_prefix:       Prefix for generated primary keys (e.g., "it")
        not_found_error: NotFoundError subclass raised by get_owned
    """

    model_class: Type[ModelT]
    id_prefix: str
    not_found_error: Type[NotFoundError]

    def __init__(self, db: Session):
        self.db = db

    def _owned_query(self, owner_id: str) -> Query:
        """Query restricted to rows the owner may see."""
        raise NotImplementedError

    def new_id(self) -> str:
        return generate_id(self.id_prefix)

    def get_owned(self, owner_id: str, entity_id: str) -> ModelT:
        """Get entity by primary key for this owner. Raises not_found_error otherwise."""
        entity = self.get_owned_optional(owner_id, entity_id)
        if entity is None:
            raise self.not_found_error(entity_id)
        return entity

    def get_owned_optional(self, owner_id: str, entity_id: str) -> Optional[ModelT]:
        """Get entity by primary key for this owner, or None."""
        if not entity_id:
            return None
        return (
            self._owned_query(owner_id)
            .filter(self.model_class.id == entity_id)
            .first()
        )

    def add(self, entity: ModelT) -> ModelT:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: ModelT) -> None:
        self.db.delete(entity)
        self.db.flush()
