"""Business rules shared by every entity: argument checks and error translation."""

import logging
from collections.abc import Sequence
from typing import Any, Generic

from crud_template.core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    ServiceError,
)
from crud_template.repositories.repository import EntityT, PagedResult, Repository

logger = logging.getLogger(__name__)

# Errors the caller can act on keep their type when re-raised with service context.
_PRESERVED_ERRORS = (InvalidArgumentError, NotFoundError, ConflictError)


class Service(Generic[EntityT]):
    def __init__(self, repository: Repository[EntityT]):
        if repository is None:
            raise ValueError('Repository must not be None.')
        self.repository = repository

    @property
    def entity_name(self) -> str:
        return self.repository.entity_name

    def list(
        self,
        page: int = 1,
        page_size: int = 10,
        filter: Any = None,
        eager_loads: Sequence[Any] = (),
    ) -> PagedResult[EntityT]:
        self.validate_pagination(page, page_size)
        try:
            return self.repository.list(page, page_size, filter, eager_loads)
        except Exception as exc:
            raise self._wrap(exc, f'An error occurred while retrieving {self.entity_name} records.') from exc

    def get_by_id(self, entity_id: int, filter: Any = None, eager_loads: Sequence[Any] = ()) -> EntityT:
        self.validate_id(entity_id)
        try:
            return self.repository.get_by_id(entity_id, filter, eager_loads)
        except NotFoundError as exc:
            raise NotFoundError(f'{self.entity_name} with ID {entity_id} was not found.') from exc
        except Exception as exc:
            raise self._wrap(exc, f'An error occurred while retrieving {self.entity_name} with ID {entity_id}.') from exc

    def add(self, entity: EntityT) -> None:
        self.validate_entity(entity)
        try:
            self.repository.add(entity)
        except Exception as exc:
            raise self._wrap(exc, f'An error occurred while adding the {self.entity_name}.') from exc
        logger.info('Created %s with ID %s', self.entity_name, entity.id)

    def update(self, entity: EntityT) -> None:
        self.validate_entity(entity)
        self.validate_id(entity.id)
        try:
            if not self.repository.exists(entity.id):
                raise NotFoundError(f'{self.entity_name} with ID {entity.id} was not found.')
            self.repository.update(entity)
        except Exception as exc:
            raise self._wrap(exc, f'An error occurred while updating {self.entity_name} with ID {entity.id}.') from exc
        logger.info('Updated %s with ID %s', self.entity_name, entity.id)

    def delete(self, entity_id: int) -> None:
        self.validate_id(entity_id)
        try:
            if not self.repository.exists(entity_id):
                raise NotFoundError(f'{self.entity_name} with ID {entity_id} was not found.')
            self.repository.delete(entity_id)
        except Exception as exc:
            raise self._wrap(exc, f'An error occurred while deleting {self.entity_name} with ID {entity_id}.') from exc
        logger.info('Deleted %s with ID %s', self.entity_name, entity_id)

    def exists(self, entity_id: int) -> bool:
        self.validate_id(entity_id)
        try:
            return self.repository.exists(entity_id)
        except Exception as exc:
            raise self._wrap(
                exc, f'An error occurred while checking whether {self.entity_name} with ID {entity_id} exists.'
            ) from exc

    @staticmethod
    def validate_id(entity_id: int | None) -> None:
        if entity_id is None or entity_id <= 0:
            raise InvalidArgumentError('The ID must be greater than 0.')

    @staticmethod
    def validate_entity(entity: Any) -> None:
        if entity is None:
            raise InvalidArgumentError('The entity must not be None.')

    @staticmethod
    def validate_pagination(page: int, page_size: int) -> None:
        if page < 1:
            raise InvalidArgumentError('The page number must be greater than or equal to 1.')
        if page_size < 1:
            raise InvalidArgumentError('The page size must be greater than or equal to 1.')

    @staticmethod
    def _wrap(exc: Exception, message: str) -> Exception:
        if isinstance(exc, NotFoundError):
            return NotFoundError(str(exc))
        if isinstance(exc, _PRESERVED_ERRORS):
            return type(exc)(f'{message} {exc}')
        logger.error('%s %s', message, exc)
        return ServiceError(f'{message} {exc}')
