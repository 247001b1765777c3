from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from crud_template.core.exceptions import DataAccessError, NotFoundError
from crud_template.models.user import User
from crud_template.repositories.repository import Repository


class UserRepository(Repository[User]):
    def __init__(self, session: Session):
        super().__init__(session, User)

    def get_by_email(self, email: str) -> User:
        try:
            user = self.session.query(User).filter(User.email == email).first()
        except SQLAlchemyError as exc:
            raise DataAccessError(f'Failed to retrieve User with email {email}.') from exc

        if user is None:
            raise NotFoundError(f'User with email {email} was not found.')
        return user
