"""Shared helper functions for dashboard routes."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Mapping, Optional

from flask import current_app

from merchlens.services.aggregation import REDUCTION_ALIASES, AggregationRequest
from merchlens.services.facets import FacetCatalog
from merchlens.utils.fields import is_missing, to_number
from merchlens.utils.filter_params import FilterCriteria


def _parse_float(value: Optional[str]) -> Optional[float]:
    if value is None or not str(value).strip():
        return None
    number = to_number(value)
    return number if math.isfinite(number) else None


def _resolve_field(value: Optional[str], fields: Iterable[str]) -> Optional[str]:
    """Match ``value`` against configured field names, case-insensitively."""
    if not value:
        return None
    lookup = {str(f).lower(): f for f in fields}
    return lookup.get(str(value).strip().lower())


def build_criteria(args, facets: FacetCatalog) -> FilterCriteria:
    """Build ``FilterCriteria`` from request args with case-insensitive fields.

    Ranges start at the facet bounds; a malformed or missing ``<field>_min`` /
    ``<field>_max`` keeps the bound it would replace.
    """
    criteria = FilterCriteria.from_facets(facets, search=(args.get("q") or "").strip())

    selections: Dict[str, List[str]] = {}
    for key in args.keys():
        real_col = _resolve_field(key, facets.options.keys())
        if not real_col:
            continue
        values = [str(v) for v in args.getlist(key) if v not in (None, "")]
        if values:
            selections.setdefault(real_col, []).extend(values)

    for column, values in selections.items():
        criteria = criteria.with_selection(column, dict.fromkeys(values))

    for name in facets.bounds:
        low = _parse_float(args.get(f"{name}_min"))
        high = _parse_float(args.get(f"{name}_max"))
        if low is not None or high is not None:
            criteria = criteria.with_range(name, low, high)

    return criteria


def stack_options(group_by: str) -> List[str]:
    return [f for f in current_app.config["GROUP_FIELDS"] if f != group_by]


def build_report_request(args, metrics) -> AggregationRequest:
    """Build an ``AggregationRequest``; unknown values fall back to the defaults.

    The stack field never equals the group field: on a collision it resets to
    the default stack field, or the first other groupable field.
    """
    cfg = current_app.config
    group_fields = cfg["GROUP_FIELDS"]

    group_by = _resolve_field(args.get("group_by"), group_fields) or cfg["DEFAULT_GROUP_BY"]
    stack_by = _resolve_field(args.get("stack_by"), group_fields) or cfg["DEFAULT_STACK_BY"]
    if stack_by == group_by:
        others = stack_options(group_by)
        if cfg["DEFAULT_STACK_BY"] in others:
            stack_by = cfg["DEFAULT_STACK_BY"]
        elif others:
            stack_by = others[0]

    measure = metrics.validate(args.get("measure")) or cfg["DEFAULT_MEASURE"]

    reduction = REDUCTION_ALIASES.get((args.get("reduction") or "").strip().lower())
    if reduction not in cfg["REDUCTIONS"]:
        reduction = cfg["DEFAULT_REDUCTION"]

    return AggregationRequest(
        group_by=group_by,
        stack_by=stack_by,
        measure=measure,
        reduction=reduction,
    )


def sort_records(
    records: List[Mapping[str, Any]], column: str, descending: bool = False
) -> List[Mapping[str, Any]]:
    """Stable sort on one column; missing values always go last."""
    present = [r for r in records if not is_missing(r.get(column))]
    missing = [r for r in records if is_missing(r.get(column))]

    numeric = all(not math.isnan(to_number(r.get(column))) for r in present)
    if numeric:
        present.sort(key=lambda r: to_number(r.get(column)), reverse=descending)
    else:
        present.sort(key=lambda r: str(r.get(column)).lower(), reverse=descending)
    return present + missing


__all__ = [
    "build_criteria",
    "build_report_request",
    "sort_records",
    "stack_options",
]
