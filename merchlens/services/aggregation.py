"""Grouped and stacked aggregation of catalogue records for bar charts."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Sequence

import pandas as pd

from merchlens.utils.fields import as_set, distinct_values, field_value, render_value, to_number

logger = logging.getLogger("merchlens")

Reduction = Literal["sum", "average"]

REDUCTION_ALIASES: Dict[str, Reduction] = {
    "sum": "sum",
    "total": "sum",
    "average": "average",
    "avg": "average",
    "mean": "average",
}

Record = Mapping[str, Any]


@dataclass(frozen=True)
class AggregationRequest:
    """Report parameters. Callers keep ``stack_by`` distinct from ``group_by``."""

    group_by: str
    stack_by: str
    measure: str
    reduction: Reduction = "sum"


@dataclass(frozen=True)
class GroupRow:
    group_key: Any
    cells: Dict[Any, float] = field(default_factory=dict)


@dataclass(frozen=True)
class AggregationResult:
    rows: List[GroupRow] = field(default_factory=list)
    stack_keys: List[Any] = field(default_factory=list)

    @property
    def total(self) -> float:
        return float(sum(sum(row.cells.values()) for row in self.rows))

    def to_chart_rows(self, index_by: str) -> List[Dict[str, Any]]:
        """Flat rows keyed by ``index_by`` plus one entry per stack key."""
        out: List[Dict[str, Any]] = []
        for row in self.rows:
            entry: Dict[str, Any] = {index_by: render_value(row.group_key)}
            for key in self.stack_keys:
                entry[render_value(key)] = row.cells.get(key, 0.0)
            out.append(entry)
        return out

    def to_frame(self, index_by: str = "group") -> pd.DataFrame:
        columns = [render_value(k) for k in self.stack_keys]
        if not self.rows:
            return pd.DataFrame(columns=[index_by] + columns)
        return pd.DataFrame(self.to_chart_rows(index_by), columns=[index_by] + columns)


def stack_keys(records: Sequence[Record], stack_by: str) -> List[Any]:
    """Distinct ``stack_by`` values across all records, first appearance first."""
    return distinct_values(records, stack_by)


def resolve_reduction(name: Any) -> Reduction:
    """Canonical reduction for ``name``; unknown names fall back to ``sum``."""
    key = str(name or "").strip().lower()
    if key in REDUCTION_ALIASES:
        return REDUCTION_ALIASES[key]
    logger.warning("Unknown reduction %r, using sum", name)
    return "sum"


def _cell_values(records: Sequence[Record], request: AggregationRequest):
    """Long-form (group, stack, value) rows keyed by rendered values.

    Also returns the first original value seen for each rendered group.
    """
    pairs = []
    groups: Dict[str, Any] = {}
    for record in records:
        values = as_set(record.get(request.group_by))
        if not values:
            continue
        # A multi-valued group field places the record under its first value only.
        group_key = render_value(values[0])
        stacks = dict.fromkeys(render_value(s) for s in as_set(record.get(request.stack_by)))
        if not stacks:
            continue
        groups.setdefault(group_key, values[0])
        value = to_number(field_value(record, request.measure))
        for stack in stacks:
            pairs.append((group_key, stack, value))
    return pd.DataFrame(pairs, columns=["group", "stack", "value"]), groups


def aggregate(records: Sequence[Record], request: AggregationRequest) -> AggregationResult:
    """Reduce ``request.measure`` per (group, stack) cell.

    Every row carries every stack key; cells without contributing records
    are 0 for both reductions. Non-numeric measure values are skipped.
    Group and stack values are matched by string form, so ``8`` and ``"8"``
    share a row or a stack key.
    """
    keys = stack_keys(records, request.stack_by)
    frame, groups = _cell_values(records, request)
    if frame.empty:
        return AggregationResult(rows=[], stack_keys=keys)

    grouped = frame.groupby(["group", "stack"], sort=False)["value"]
    if resolve_reduction(request.reduction) == "average":
        reduced = grouped.mean()
    else:
        reduced = grouped.sum()
    cells = reduced.fillna(0.0).to_dict()

    rows = [
        GroupRow(
            group_key=value,
            cells={key: float(cells.get((group, render_value(key)), 0.0)) for key in keys},
        )
        for group, value in groups.items()
    ]
    return AggregationResult(rows=rows, stack_keys=keys)


__all__ = [
    "REDUCTION_ALIASES",
    "AggregationRequest",
    "AggregationResult",
    "GroupRow",
    "Reduction",
    "aggregate",
    "resolve_reduction",
    "stack_keys",
]
