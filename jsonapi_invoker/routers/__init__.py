"""FastAPI integration."""

from .base import JSONAPIRouter

__all__ = ["JSONAPIRouter"]
