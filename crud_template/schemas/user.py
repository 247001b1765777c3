from pydantic import BaseModel, EmailStr, Field, field_validator

from crud_template.auth.passwords import BCRYPT_MAX_PASSWORD_BYTES
from crud_template.models.user import EMAIL_MAX_LENGTH, NAME_MAX_LENGTH, UserRole

PASSWORD_MIN_LENGTH = 8


def _validate_password_bytes(value: str) -> str:
    if len(value.encode('utf-8')) > BCRYPT_MAX_PASSWORD_BYTES:
        raise ValueError(f'Password must be {BCRYPT_MAX_PASSWORD_BYTES} bytes or fewer.')
    return value


class UserCredentials(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH)

    @field_validator('email')
    @classmethod
    def validate_email_length(cls, value: str) -> str:
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(f'Email must be {EMAIL_MAX_LENGTH} characters or fewer.')
        return value

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return _validate_password_bytes(value)


class LoginRequest(UserCredentials):
    pass


class UserCreateRequest(UserCredentials):
    """Body for registration and administrator-issued creation.

    ``role`` is accepted for compatibility but the server always decides it.
    """

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    role: UserRole | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Name is required.')
        return normalized


class UserUpdateRequest(UserCreateRequest):
    id: int | None = None
    role: UserRole


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    password: str
    role: UserRole

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    token: str
