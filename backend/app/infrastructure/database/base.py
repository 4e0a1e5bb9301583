"""Declarative base shared by the chunk store and the derived-artifact cache tables."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for the ORM models; ``Base.metadata`` drives ``create_all``."""
