"""Apply JSON:API filter and sort parameters to SQLAlchemy statements."""

from __future__ import annotations

from typing import Any, Callable

from sqlalchemy import and_, asc, desc, or_

# Operator mapping for filter expressions
FILTER_OPERATORS: dict[str, Callable[[Any, Any], Any]] = {
    # Comparison operators
    "eq": lambda col, val: col == val,
    "ne": lambda col, val: col != val,
    "neq": lambda col, val: col != val,
    "gt": lambda col, val: col > val,
    "gte": lambda col, val: col >= val,
    "ge": lambda col, val: col >= val,
    "lt": lambda col, val: col < val,
    "lte": lambda col, val: col <= val,
    "le": lambda col, val: col <= val,
    # Pattern matching
    "ilike": lambda col, val: col.ilike(val),
    "like": lambda col, val: col.like(val),
    # Membership operators
    "in": lambda col, val: col.in_(val if isinstance(val, list) else [val]),
    "not_in": lambda col, val: ~col.in_(val if isinstance(val, list) else [val]),
    "nin": lambda col, val: ~col.in_(val if isinstance(val, list) else [val]),
    # Null checks
    "is_null": lambda col, val: col.is_(None),
    "is_not_null": lambda col, val: col.isnot(None),
    # Range operator
    "between": lambda col, val: (
        col.between(val[0], val[1]) if isinstance(val, list) and len(val) == 2 else None
    ),
}


class SQLAlchemyQueryHelper:
    """Apply JSON:API query parameters to ``select()`` statements for one model."""

    def __init__(self, *, model: Any) -> None:
        self.model = model

    def _column(self, field: str) -> Any | None:
        column = getattr(self.model, field, None)
        return column if hasattr(column, "property") else None

    def _build_expression(self, node: dict[str, Any]) -> Any | None:
        if "and" in node or "or" in node:
            combine = and_ if "and" in node else or_
            children = node.get("and") or node.get("or") or []
            expressions = [
                expr for expr in (self._build_expression(child) for child in children) if expr is not None
            ]
            return combine(*expressions) if expressions else None

        field = node.get("field")
        column = self._column(field) if field else None
        if column is None:
            return None
        operator_func = FILTER_OPERATORS.get(node.get("op", "eq"), FILTER_OPERATORS["eq"])
        expression = operator_func(column, node.get("val"))
        return column == node.get("val") if expression is None else expression

    def apply_filters(self, statement: Any, params: dict[str, Any]) -> Any:
        """Apply the filter parameter family.

        Supported shapes:
        1. ``{"field": "value"}`` -> field = value
        2. ``{"field": {"op": "gt", "val": 10}}``
        3. ``[{"field": "name", "op": "ilike", "val": "%john%"}, ...]`` (AND-ed)
        4. nested ``{"or": [...]}`` / ``{"and": [...]}`` nodes
        """
        filters = params.get("filter") or {}
        if isinstance(filters, dict) and ("and" in filters or "or" in filters):
            nodes = [filters]
        elif isinstance(filters, dict):
            nodes = [
                {"field": field, **value}
                if isinstance(value, dict) and "op" in value
                else {"field": field, "op": "eq", "val": value}
                for field, value in filters.items()
            ]
        else:
            nodes = [item for item in filters if isinstance(item, dict)]

        expressions = [
            expr for expr in (self._build_expression(node) for node in nodes) if expr is not None
        ]
        if expressions:
            statement = statement.where(and_(*expressions))
        return statement

    def apply_sorting(self, statement: Any, params: dict[str, Any]) -> Any:
        """Apply sort parameters; unknown fields are ignored."""
        for entry in params.get("sort", []):
            column = self._column(entry.get("field", ""))
            if column is None:
                continue
            order = desc if entry.get("direction") == "desc" else asc
            statement = statement.order_by(order(column))
        return statement
