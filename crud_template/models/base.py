"""Base entity definitions."""

from sqlalchemy import Column, Integer
from crud_template.database import Base


class BaseEntity(Base):
    """Persisted record keyed by an auto-assigned integer identity."""
    __abstract__ = True

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
