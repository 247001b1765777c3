"""User model definitions."""

import enum

from sqlalchemy import Column, Enum, String
from crud_template.models.base import BaseEntity


NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 100


class UserRole(str, enum.Enum):
    ADMINISTRATOR = "Administrator"
    CLIENT = "Client"


class User(BaseEntity):
    """Represents an application user account."""
    __tablename__ = "users"

    name = Column(String(NAME_MAX_LENGTH), nullable=False)
    email = Column(String(EMAIL_MAX_LENGTH), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)  # bcrypt hash
    role = Column(Enum(UserRole, name="user_role"), nullable=False, default=UserRole.CLIENT)

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r}, role={self.role!r})"
