import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('BCRYPT_ROUNDS', '4')
os.environ.setdefault('JWT_SECRET_KEY', 'test-signing-key-that-is-long-enough-for-hs256')

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from crud_template.auth.passwords import hash_password  # noqa: E402
from crud_template.database import Base  # noqa: E402
from crud_template.models.user import User, UserRole  # noqa: E402

DEFAULT_PASSWORD = 'password123'


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def make_user(db_session):
    def factory(
        email: str,
        name: str = 'Test User',
        role: UserRole = UserRole.CLIENT,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        user = User(name=name, email=email, password=hash_password(password), role=role)
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return factory
