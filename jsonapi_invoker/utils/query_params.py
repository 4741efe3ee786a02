"""Helpers for JSON:API query parameter parsing."""

from __future__ import annotations

import json
import re
from typing import Any, Mapping
from urllib.parse import unquote

from jsonapi_invoker.core.errors import BadRequestError

FILTER_KEY = re.compile(r"^filter\[([^\]]+)\](?:\[([^\]]+)\])?$")
LIST_OPERATORS = ("in", "not_in", "nin", "between")
INTEGER_PAGE_KEYS = ("offset", "limit")


def _split_csv(value: str) -> list[str]:
    return [item for item in (part.strip() for part in value.split(",")) if item]


def _maybe_parse_json(value: str) -> Any:
    """Parse JSON string if it looks like JSON, otherwise return as-is.

    Handles URL-encoded JSON strings and regular JSON strings.
    """
    stripped = value.strip()
    if not stripped:
        return value

    for candidate in (stripped, unquote(stripped)):
        if candidate[:1] in ("[", "{"):
            try:
                return json.loads(candidate)
            except json.JSONDecodeError:
                continue
    return value


def empty_query_params() -> dict[str, Any]:
    return {"include": [], "fields": {}, "sort": [], "page": {}, "filter": {}}


def parse_query_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Normalize JSON:API query parameter families."""
    normalized = empty_query_params()

    for key, value in params.items():
        if value is None:
            continue
        raw_value = str(value)
        if key == "include":
            normalized["include"] = _split_csv(raw_value)
        elif key.startswith("fields[") and key.endswith("]"):
            resource_type = key[len("fields[") : -1]
            normalized["fields"][resource_type] = _split_csv(raw_value)
        elif key == "sort":
            normalized["sort"] = [
                {"field": field.lstrip("-"), "direction": "desc" if field.startswith("-") else "asc"}
                for field in _split_csv(raw_value)
            ]
        elif key.startswith("page[") and key.endswith("]"):
            page_key = key[len("page[") : -1]
            try:
                normalized["page"][page_key] = int(raw_value)
            except ValueError:
                if page_key in INTEGER_PAGE_KEYS:
                    raise BadRequestError(
                        f"{key} must be an integer",
                        code="invalid_page",
                        source={"parameter": key},
                    ) from None
                normalized["page"][page_key] = raw_value
        elif key == "filter":
            parsed_filter = _maybe_parse_json(raw_value)
            if isinstance(parsed_filter, (list, dict)):
                normalized["filter"] = parsed_filter
            else:
                normalized["filter"] = {"value": parsed_filter}
        elif key.startswith("filter"):
            if not isinstance(normalized["filter"], dict):
                normalized["filter"] = {}
            parsed_value = _maybe_parse_json(raw_value)
            match = FILTER_KEY.match(key)
            if match is None:
                normalized["filter"][key] = parsed_value
                continue
            field_name, op_name = match.group(1), match.group(2)
            if not op_name:
                # filter[field]=value
                normalized["filter"][field_name] = parsed_value
                continue
            # filter[field][op]=value -> {"field": {"op": op, "val": value}}
            if op_name in LIST_OPERATORS:
                if isinstance(parsed_value, str):
                    parsed_value = _split_csv(parsed_value)
                elif not isinstance(parsed_value, list):
                    parsed_value = [parsed_value]
            normalized["filter"][field_name] = {"op": op_name, "val": parsed_value}

    return normalized
