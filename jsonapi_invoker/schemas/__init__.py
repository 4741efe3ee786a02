"""Pydantic schemas for JSON:API request documents."""

from .resource import (
    JSONAPIRelationship,
    JSONAPIRequestDocument,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
)

__all__ = [
    "JSONAPIRelationship",
    "JSONAPIRequestDocument",
    "JSONAPIResource",
    "JSONAPIResourceIdentifier",
]
