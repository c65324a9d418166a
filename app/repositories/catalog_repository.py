"""
app/repositories/catalog_repository.py

Read/create access to the small reference tables (specialties, locations,
payment methods, appointment statuses).
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class CatalogRepository(Generic[ModelT]):
    """
    One repository instance per reference model.

    Values left as None are not passed to the model so column defaults
    (e.g. the status colour) apply.
    """

    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self._session = session
        self._model = model

    def list_all(self) -> list[ModelT]:
        return list(self._session.scalars(select(self._model).order_by(self._model.name)))

    def create(self, values: dict[str, Any]) -> ModelT:
        row = self._model(**{key: value for key, value in values.items() if value is not None})
        self._session.add(row)
        self._session.flush()
        return row
