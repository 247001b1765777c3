from datetime import datetime, timedelta, timezone

import jwt

from crud_template.core import config
from crud_template.models.user import User


def create_access_token(user: User, expires_minutes: int | None = None) -> str:
    expire_minutes = expires_minutes or config.JWT_EXPIRES_MINUTES
    issued_at = datetime.now(timezone.utc)
    role = user.role.value if hasattr(user.role, "value") else str(user.role)
    payload = {
        "sub": str(user.id),
        "name": user.name,
        "email": user.email,
        "role": role,
        "iss": config.JWT_ISSUER,
        "aud": config.JWT_AUDIENCE,
        "iat": issued_at,
        "exp": issued_at + timedelta(minutes=expire_minutes),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    # Signature and lifetime are checked; issuer and audience are informational.
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"verify_aud": False, "require": ["exp", "sub"]},
    )
