import logging

from crud_template.auth import jwt_handler
from crud_template.auth.passwords import verify_password
from crud_template.core.exceptions import NotFoundError, ServiceError
from crud_template.models.user import User, UserRole
from crud_template.repositories.user_repository import UserRepository
from crud_template.services.service import Service

logger = logging.getLogger(__name__)


class UserService(Service[User]):
    """User accounts: generic CRUD plus registration and token login."""

    repository: UserRepository

    def __init__(self, repository: UserRepository):
        super().__init__(repository)

    def get_by_email(self, email: str) -> User:
        try:
            return self.repository.get_by_email(email)
        except NotFoundError as exc:
            raise NotFoundError(f'User with email {email} was not found.') from exc
        except Exception as exc:
            raise self._wrap(exc, f'An error occurred while retrieving the user with email {email}.') from exc

    def register(self, entity: User) -> None:
        """Add a self-registered account; the role is always Client."""
        self.validate_entity(entity)
        entity.role = UserRole.CLIENT
        try:
            self.repository.add(entity)
        except Exception as exc:
            raise self._wrap(exc, 'An error occurred while registering the user.') from exc
        logger.info('Registered user %s', entity.id)

    def authenticate(self, email: str, password: str) -> str | None:
        """Return a signed access token, or ``None`` when the credentials do not match."""
        try:
            user = self.repository.get_by_email(email)
        except NotFoundError:
            logger.debug('Login rejected: no account for %s', email)
            return None
        except Exception as exc:
            raise ServiceError(f'An error occurred while authenticating the user. {exc}') from exc

        if not verify_password(password, user.password):
            logger.debug('Login rejected: wrong password for user %s', user.id)
            return None

        return jwt_handler.create_access_token(user)
