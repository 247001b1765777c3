from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from crud_template.auth.passwords import hash_password
from crud_template.database import get_db
from crud_template.models.user import User, UserRole
from crud_template.repositories.user_repository import UserRepository
from crud_template.routes.crud_router import AUTHENTICATED, build_crud_router, to_http_exception
from crud_template.schemas.user import (
    LoginRequest,
    TokenResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from crud_template.services.user_service import UserService

ADMINISTRATOR_ONLY = (UserRole.ADMINISTRATOR,)

USER_ROUTE_ACCESS = {
    'list': ADMINISTRATOR_ONLY,
    'get': AUTHENTICATED,
    'create': ADMINISTRATOR_ONLY,
    'update': ADMINISTRATOR_ONLY,
    'delete': ADMINISTRATOR_ONLY,
}

INVALID_CREDENTIALS_MESSAGE = 'Invalid email and/or password.'


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(UserRepository(db))


def prepare_admin_create(user: User) -> None:
    user.password = hash_password(user.password)
    user.role = UserRole.ADMINISTRATOR


def prepare_update(user: User) -> None:
    # The submitted password is rehashed on every update, changed or not.
    user.password = hash_password(user.password)


router = build_crud_router(
    prefix='/users',
    model=User,
    get_service=get_user_service,
    response_schema=UserResponse,
    create_schema=UserCreateRequest,
    update_schema=UserUpdateRequest,
    access=USER_ROUTE_ACCESS,
    prepare_create=prepare_admin_create,
    prepare_update=prepare_update,
    tags=['users'],
)


@router.post('/register', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: UserCreateRequest,
    request: Request,
    response: Response,
    service: UserService = Depends(get_user_service),
):
    user = User(
        name=data.name,
        email=data.email,
        password=hash_password(data.password),
        role=UserRole.CLIENT,
    )
    try:
        service.register(user)
    except Exception as exc:
        raise to_http_exception(exc) from exc

    response.headers['Location'] = str(request.url_for('get_entity', entity_id=user.id).path)
    return user


@router.post('/login', response_model=TokenResponse)
def login(data: LoginRequest, service: UserService = Depends(get_user_service)):
    try:
        token = service.authenticate(data.email, data.password)
    except Exception as exc:
        raise to_http_exception(exc) from exc

    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=INVALID_CREDENTIALS_MESSAGE,
        )
    return {'token': token}
