"""Generic list/get/create/update/delete routes for one resource.

Each operation is registered from an access table mapping the operation name
to ``PUBLIC`` (no token), ``AUTHENTICATED`` (any valid token) or a tuple of
roles allowed to call it.
"""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from crud_template.auth.dependencies import require_roles
from crud_template.core import config
from crud_template.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from crud_template.schemas.common import MessageResponse, PagedResponse
from crud_template.services.service import Service

logger = logging.getLogger(__name__)

PUBLIC = None
AUTHENTICATED = ()

CRUD_OPERATIONS = ('list', 'get', 'create', 'update', 'delete')

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
UNEXPECTED_ERROR_MESSAGE = 'An unexpected error occurred.'

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {'model': MessageResponse},
    status.HTTP_401_UNAUTHORIZED: {'model': MessageResponse},
    status.HTTP_403_FORBIDDEN: {'model': MessageResponse},
    status.HTTP_404_NOT_FOUND: {'model': MessageResponse},
    status.HTTP_409_CONFLICT: {'model': MessageResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {'model': MessageResponse},
}


def to_http_exception(exc: Exception) -> HTTPException:
    if isinstance(exc, InvalidArgumentError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))

    logger.error('Unhandled error while serving request: %s', exc, exc_info=exc)
    detail = str(exc) if config.EXPOSE_ERROR_DETAILS else UNEXPECTED_ERROR_MESSAGE
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def access_dependencies(policy: tuple | None) -> list:
    if policy is PUBLIC:
        return []
    return [Depends(require_roles(*policy))]


def build_crud_router(
    *,
    prefix: str,
    model: type,
    get_service: Callable[..., Service],
    response_schema: type,
    create_schema: type,
    update_schema: type,
    access: dict[str, tuple | None] | None = None,
    prepare_create: Callable[[Any], None] | None = None,
    prepare_update: Callable[[Any], None] | None = None,
    tags: list[str] | None = None,
) -> APIRouter:
    """Register the generic verb set for ``model`` under ``prefix``.

    ``prepare_create`` and ``prepare_update`` receive the entity built from the
    request body right before it is handed to the service.
    """
    access = {**{operation: AUTHENTICATED for operation in CRUD_OPERATIONS}, **(access or {})}
    router = APIRouter(prefix=prefix, tags=tags, responses=ERROR_RESPONSES)
    paged_schema = PagedResponse[response_schema]

    def build_entity(payload) -> Any:
        return model(**payload.model_dump(exclude={'id'}))

    @router.get('', response_model=paged_schema, dependencies=access_dependencies(access['list']))
    def list_entities(
        page: int = Query(default=DEFAULT_PAGE),
        page_size: int = Query(default=DEFAULT_PAGE_SIZE, alias='pageSize'),
        service: Service = Depends(get_service),
    ):
        try:
            result = service.list(page, page_size)
        except Exception as exc:
            raise to_http_exception(exc) from exc
        return paged_schema.model_validate(result, from_attributes=True)

    @router.get('/{entity_id}', response_model=response_schema, dependencies=access_dependencies(access['get']))
    def get_entity(entity_id: int, service: Service = Depends(get_service)):
        try:
            return service.get_by_id(entity_id)
        except Exception as exc:
            raise to_http_exception(exc) from exc

    @router.post(
        '',
        response_model=response_schema,
        status_code=status.HTTP_201_CREATED,
        dependencies=access_dependencies(access['create']),
    )
    def create_entity(
        payload: create_schema,
        request: Request,
        response: Response,
        service: Service = Depends(get_service),
    ):
        entity = build_entity(payload)
        try:
            if prepare_create is not None:
                prepare_create(entity)
            service.add(entity)
        except Exception as exc:
            raise to_http_exception(exc) from exc
        response.headers['Location'] = f"{request.url.path.rstrip('/')}/{entity.id}"
        return entity

    @router.put('/{entity_id}', response_model=response_schema, dependencies=access_dependencies(access['update']))
    def update_entity(entity_id: int, payload: update_schema, service: Service = Depends(get_service)):
        entity = build_entity(payload)
        entity.id = entity_id
        try:
            if prepare_update is not None:
                prepare_update(entity)
            service.update(entity)
        except Exception as exc:
            raise to_http_exception(exc) from exc
        return entity

    @router.delete(
        '/{entity_id}',
        status_code=status.HTTP_204_NO_CONTENT,
        response_class=Response,
        dependencies=access_dependencies(access['delete']),
    )
    def delete_entity(entity_id: int, service: Service = Depends(get_service)):
        try:
            service.delete(entity_id)
        except Exception as exc:
            raise to_http_exception(exc) from exc
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    return router
