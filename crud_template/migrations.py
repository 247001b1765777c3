import logging
from threading import Lock

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from crud_template.auth.passwords import hash_password
from crud_template.core import config
from crud_template.database import Base, engine
from crud_template.models.user import User, UserRole

logger = logging.getLogger(__name__)

_schema_lock = Lock()

SEED_USERS = (
    ('Administrator', config.SEED_ADMIN_EMAIL, UserRole.ADMINISTRATOR),
    ('Client', config.SEED_CLIENT_EMAIL, UserRole.CLIENT),
)


def ensure_user_schema(bind: Engine | None = None) -> int:
    """Create missing tables and insert the seed accounts into an empty users table.

    Returns the number of seed rows inserted.
    """
    bind = bind or engine

    with _schema_lock:
        Base.metadata.create_all(bind=bind)

        with Session(bind) as session:
            if session.query(User.id).first() is not None:
                return 0

            for name, email, role in SEED_USERS:
                session.add(
                    User(
                        name=name,
                        email=email,
                        password=hash_password(config.SEED_PASSWORD),
                        role=role,
                    )
                )
            session.commit()

    logger.info('Seeded %d user accounts.', len(SEED_USERS))
    return len(SEED_USERS)
