"""Pydantic schemas for JSON:API v1.1 documents."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class JSONAPIResourceIdentifier(BaseModel):
    """Resource identifier object: type + id."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    type: str
    id: str


class JSONAPIRelationship(BaseModel):
    """Relationship object in a request body; only ``data`` is read."""

    data: Union[JSONAPIResourceIdentifier, List[JSONAPIResourceIdentifier], None]


class JSONAPIResource(BaseModel):
    """Resource object with attributes and relationships."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    type: str
    id: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, JSONAPIRelationship]] = None


class JSONAPIRequestDocument(BaseModel):
    """Top-level document accepted by POST and PATCH."""

    data: JSONAPIResource
    meta: Optional[Dict[str, Any]] = None
