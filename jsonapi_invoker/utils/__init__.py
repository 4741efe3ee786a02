"""Utilities for JSON:API parsing, headers, scanning and type coercion."""

from .content_negotiation import parse_jsonapi_media_type
from .query_params import parse_query_params
from .scanning import scan_package
from .type_parser import TypeParser

__all__ = ["TypeParser", "parse_jsonapi_media_type", "parse_query_params", "scan_package"]
