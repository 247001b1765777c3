import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./crud_template.db")

DEFAULT_JWT_SECRET_KEY = "change-me-to-a-long-random-signing-key"
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET_KEY)
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "480"))
JWT_ISSUER = os.getenv("JWT_ISSUER", "crud-template")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "crud-template-clients")

BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

SEED_ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@example.com")
SEED_CLIENT_EMAIL = os.getenv("SEED_CLIENT_EMAIL", "client@example.com")
SEED_PASSWORD = os.getenv("SEED_PASSWORD", "changeme123")

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:4200"])

# 500 responses carry the raw exception message only when this is on.
EXPOSE_ERROR_DETAILS = _get_bool(
    os.getenv("EXPOSE_ERROR_DETAILS"),
    default=APP_ENV.lower() != "production",
)

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == DEFAULT_JWT_SECRET_KEY:
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
