"""SQLAlchemy-backed repositories for JSON:API resources."""

from .helpers import SQLAlchemyQueryHelper
from .repository import SQLAlchemyRepository

__all__ = ["SQLAlchemyQueryHelper", "SQLAlchemyRepository"]
