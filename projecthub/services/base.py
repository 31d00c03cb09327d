"""Shared plumbing for the entity services."""

from typing import Any, Iterable, Optional, Type

from sqlalchemy.orm import Session

from projecthub.errors import NotFound
from projecthub.utils.permissions import Action, Identity, authorize


class ServiceBase:
    """A request-scoped service acting on behalf of one caller"""

    def __init__(self, db: Session, identity: Optional[Identity] = None):
        self.db = db
        self.identity = identity

    def _get(self, model: Type[Any], entity_id: int, kind: str, options: Iterable[Any] = ()):
        instance = (
            self.db.query(model)
            .options(*options)
            .filter(model.id == entity_id)
            .first()
        )
        if instance is None:
            raise NotFound(kind, entity_id)
        return instance

    def _authorize(self, action: Action, target: Any = None, **kwargs: Any) -> None:
        authorize(self.identity, action, target, **kwargs)
