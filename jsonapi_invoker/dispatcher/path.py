"""Parse request paths into JSON:API path descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import unquote

from jsonapi_invoker.core.errors import BadRequestError

RELATIONSHIPS_SEGMENT = "relationships"


@dataclass(frozen=True)
class JsonPath:
    """``/{type}[/{ids}[/relationships]/{field}]``"""

    resource_type: str
    ids: tuple[str, ...] = ()
    field_name: str | None = None
    relationship_linkage: bool = False

    @property
    def is_collection(self) -> bool:
        return not self.ids

    @property
    def is_field(self) -> bool:
        return self.field_name is not None

    @property
    def single_id(self) -> str | None:
        return self.ids[0] if len(self.ids) == 1 else None


def parse_path(path: str) -> JsonPath:
    parts = [unquote(part) for part in path.strip("/").split("/") if part]
    if not parts:
        raise BadRequestError("path does not name a resource type", code="invalid_path")

    resource_type = parts[0]
    if len(parts) == 1:
        return JsonPath(resource_type)

    ids = tuple(resource_id for resource_id in parts[1].split(",") if resource_id)
    if not ids:
        raise BadRequestError("path has an empty resource id", code="invalid_path")
    if len(parts) == 2:
        return JsonPath(resource_type, ids)

    if len(ids) > 1:
        raise BadRequestError("relationships can only be read for a single id", code="invalid_path")
    if len(parts) == 3 and parts[2] != RELATIONSHIPS_SEGMENT:
        return JsonPath(resource_type, ids, parts[2])
    if len(parts) == 4 and parts[2] == RELATIONSHIPS_SEGMENT:
        return JsonPath(resource_type, ids, parts[3], relationship_linkage=True)
    raise BadRequestError(f"unsupported path '{path}'", code="invalid_path")
