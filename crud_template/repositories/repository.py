"""Generic data access for entities keyed by an integer ``id``."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from crud_template.core.exceptions import (
    ConflictError,
    DataAccessError,
    InvalidArgumentError,
    NotFoundError,
)
from crud_template.models.base import BaseEntity

logger = logging.getLogger(__name__)

EntityT = TypeVar('EntityT', bound=BaseEntity)

# Largest id the integer primary key column can hold on every supported store.
MAX_ENTITY_ID = 2**31 - 1
# LIMIT and OFFSET are bound as signed 64-bit integers.
MAX_ROW_OFFSET = 2**63 - 1


@dataclass(frozen=True)
class PagedResult(Generic[EntityT]):
    items: list[EntityT]
    current_page: int
    page_size: int
    total_count: int


class Repository(Generic[EntityT]):
    """CRUD operations for one mapped entity class over a SQLAlchemy session.

    ``filter`` arguments are SQLAlchemy boolean clauses and ``eager_loads`` are
    loader options such as ``selectinload(Model.relation)``.
    """

    def __init__(self, session: Session, model: type[EntityT]):
        self.session = session
        self.model = model

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    def list(
        self,
        page: int = 1,
        page_size: int = 10,
        filter: Any = None,
        eager_loads: Sequence[Any] = (),
    ) -> PagedResult[EntityT]:
        try:
            query = self.session.query(self.model)
            if filter is not None:
                query = query.filter(filter)
            if eager_loads:
                query = query.options(*eager_loads)

            total_count = query.count()
            offset = (page - 1) * page_size
            if offset > MAX_ROW_OFFSET:
                items = []
            else:
                items = (
                    query.order_by(self.model.id)
                    .offset(offset)
                    .limit(min(page_size, MAX_ROW_OFFSET))
                    .all()
                )
        except SQLAlchemyError as exc:
            raise DataAccessError(f'Failed to retrieve {self.entity_name} records.') from exc

        return PagedResult(
            items=list(items),
            current_page=page,
            page_size=page_size,
            total_count=total_count,
        )

    def get_by_id(
        self,
        entity_id: int,
        filter: Any = None,
        eager_loads: Sequence[Any] = (),
    ) -> EntityT:
        if entity_id <= 0:
            raise InvalidArgumentError('The ID must be greater than 0.')
        if entity_id > MAX_ENTITY_ID:
            raise NotFoundError(f'{self.entity_name} with ID {entity_id} was not found.')

        try:
            query = self.session.query(self.model)
            if filter is not None:
                query = query.filter(filter)
            if eager_loads:
                query = query.options(*eager_loads)
            entity = query.filter(self.model.id == entity_id).first()
        except SQLAlchemyError as exc:
            raise DataAccessError(f'Failed to retrieve {self.entity_name} with ID {entity_id}.') from exc

        if entity is None:
            raise NotFoundError(f'{self.entity_name} with ID {entity_id} was not found.')
        return entity

    def add(self, entity: EntityT) -> None:
        try:
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise self._write_error(exc, f'Failed to add {self.entity_name}.') from exc

    def update(self, entity: EntityT) -> None:
        stored = self.get_by_id(entity.id)
        try:
            state = inspect(entity)
            for attribute in inspect(self.model).column_attrs:
                if attribute.key != 'id' and attribute.key in state.dict:
                    setattr(stored, attribute.key, state.dict[attribute.key])
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise self._write_error(exc, f'Failed to update {self.entity_name} with ID {entity.id}.') from exc

    def delete(self, entity_id: int) -> None:
        entity = self.get_by_id(entity_id)
        try:
            self.session.delete(entity)
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise self._write_error(exc, f'Failed to delete {self.entity_name} with ID {entity_id}.') from exc

    def exists(self, entity_id: int) -> bool:
        if entity_id <= 0 or entity_id > MAX_ENTITY_ID:
            return False

        try:
            return self.session.query(self.model.id).filter(self.model.id == entity_id).first() is not None
        except SQLAlchemyError as exc:
            raise DataAccessError(
                f'Failed to check whether {self.entity_name} with ID {entity_id} exists.'
            ) from exc

    def _write_error(self, exc: SQLAlchemyError, message: str) -> DataAccessError:
        if isinstance(exc, IntegrityError):
            logger.info('%s rejected by a store constraint: %s', message, exc.orig)
            return ConflictError(f'{message} A record with the same unique value already exists.')
        return DataAccessError(message)
