"""
LocalBiz Directory — Sort Parameter Resolution
================================================

What:  Turns the `sortBy` / `order` query parameters of the list endpoints
       into ORDER BY clauses.
How:   `sortBy` may name any mapped column of the model, either by its API
       spelling (createdAt) or its attribute name (created_at). Anything else
       is rejected with InvalidSortError instead of reaching the database.
       The primary key is appended as a tie-breaker so rows created in the
       same instant keep a stable order.
"""

from typing import Any, Dict, List, Optional, Type

from pydantic.alias_generators import to_camel
from sqlalchemy import inspect

from app.exceptions import InvalidSortError


def sortable_columns(model: Type[Any]) -> Dict[str, Any]:
    """Map both snake_case and camelCase names to the model's columns."""
    columns: Dict[str, Any] = {}
    for attr in inspect(model).column_attrs:
        column = getattr(model, attr.key)
        columns[attr.key] = column
        columns[to_camel(attr.key)] = column
    return columns


def resolve_order(
    model: Type[Any],
    sort_by: Optional[str],
    order: Optional[str],
    default_sort: str = "created_at",
    default_order: str = "asc",
    strict_order: bool = False,
) -> List[Any]:
    """
    Build ORDER BY clauses for `model`.

    Args:
        sort_by: column name from the query string (None → default_sort)
        order: 'asc' or 'desc', compared case-insensitively (None → default_order)
        strict_order: when False any value other than 'desc' sorts ascending;
                      when True an unknown direction raises InvalidSortError

    Raises:
        InvalidSortError: unknown column, or unknown direction with strict_order
    """
    columns = sortable_columns(model)
    key = sort_by or default_sort
    column = columns.get(key)
    if column is None:
        raise InvalidSortError(
            message=f"Cannot sort by '{key}'",
            field="sortBy",
        )

    direction = (order or default_order).lower()
    if direction not in ("asc", "desc"):
        if strict_order:
            raise InvalidSortError(
                message=f"Invalid sort order '{order}'. Must be 'asc' or 'desc'",
                field="order",
            )
        direction = "asc"

    primary_key = getattr(model, inspect(model).primary_key[0].key)
    clauses = [column]
    if column.key != primary_key.key:
        clauses.append(primary_key)
    if direction == "desc":
        return [c.desc() for c in clauses]
    return [c.asc() for c in clauses]
