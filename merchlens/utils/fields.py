"""Record field helpers shared by facets, filtering and aggregation.

A catalogue record maps field names to either a scalar or a collection of
scalars (``color``, ``available_sizes``). Everything that inspects a field
goes through :func:`as_set` so the two shapes are handled in one place.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

SET_TYPES = (list, tuple, set, frozenset)


def is_missing(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, float) and math.isnan(value)


def is_set_valued(value: Any) -> bool:
    return isinstance(value, SET_TYPES)


def as_set(value: Any) -> Tuple[Any, ...]:
    """Normalize a scalar or collection field value to an ordered tuple.

    Missing values give an empty tuple, duplicates keep their first position.
    """
    if is_missing(value):
        return ()
    if not is_set_valued(value):
        return (value,)
    members = [v for v in value if not is_missing(v)]
    return tuple(dict.fromkeys(members))


def to_number(value: Any) -> float:
    """Coerce a field value to float; anything malformed becomes NaN."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and not value.strip():
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def margin_percent(record: Mapping[str, Any]) -> float:
    price = to_number(record.get("price"))
    cost = to_number(record.get("cost"))
    if price == 0:
        return math.nan
    return (price - cost) / price * 100


def margin_amount(record: Mapping[str, Any]) -> float:
    quantity = to_number(record.get("quantity_sold"))
    return quantity * (to_number(record.get("price")) - to_number(record.get("cost")))


def field_value(record: Mapping[str, Any], field: str) -> Any:
    """Raw value of ``field``, or the derived value for the margin measures."""
    if field == "margin_percent":
        return margin_percent(record)
    if field == "margin_amount":
        return margin_amount(record)
    return record.get(field)


def _render_scalar(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_value(value: Any) -> Optional[str]:
    """String form used by text search and CSV export."""
    if is_missing(value):
        return None
    if is_set_valued(value):
        return ", ".join(_render_scalar(v) for v in as_set(value))
    return _render_scalar(value)


def distinct_values(records: Iterable[Mapping[str, Any]], name: str) -> List[Any]:
    """Distinct values of ``name`` across records, flattening set-valued fields.

    Values with the same string form count once (``8`` and ``"8"``); the first
    one encountered is kept, in first-encounter order.
    """
    seen: Dict[str, Any] = {}
    for record in records:
        for value in as_set(record.get(name)):
            seen.setdefault(render_value(value), value)
    return list(seen.values())


__all__ = [
    "as_set",
    "distinct_values",
    "field_value",
    "is_missing",
    "is_set_valued",
    "margin_amount",
    "margin_percent",
    "render_value",
    "to_number",
]
