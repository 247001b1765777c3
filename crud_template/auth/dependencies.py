from dataclasses import dataclass

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from crud_template.auth import jwt_handler
from crud_template.models.user import UserRole

security = HTTPBearer(auto_error=False)

_BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity rebuilt from token claims, without a store lookup."""

    id: int
    name: str
    email: str
    role: UserRole


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers=_BEARER_CHALLENGE,
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthenticatedUser:
    if credentials is None:
        raise _unauthorized("Not authenticated")

    try:
        payload = jwt_handler.decode_access_token(credentials.credentials)
    except jwt.PyJWTError as exc:
        raise _unauthorized("Invalid token") from exc

    try:
        return AuthenticatedUser(
            id=int(payload["sub"]),
            name=payload.get("name", ""),
            email=payload.get("email", ""),
            role=UserRole(payload.get("role")),
        )
    except (KeyError, ValueError) as exc:
        raise _unauthorized("Invalid token claims") from exc


def require_roles(*roles: UserRole):
    """Build a dependency that admits authenticated callers holding one of ``roles``.

    With no roles any authenticated caller is admitted.
    """

    def dependency(current_user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if roles and current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action.",
            )
        return current_user

    return dependency
