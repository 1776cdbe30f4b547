"""Facet catalog: filter options and numeric bounds over the full catalogue."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from merchlens.utils.fields import distinct_values, field_value, to_number


@dataclass(frozen=True)
class RangeBounds:
    min: float = 0.0
    max: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class FacetCatalog:
    """Distinct values per multi-select field and bounds per range field.

    Always built from the unfiltered catalogue so that range controls keep
    their full extent while filters are applied.
    """

    options: Dict[str, List[Any]] = field(default_factory=dict)
    bounds: Dict[str, RangeBounds] = field(default_factory=dict)

    def bounds_for(self, name: str) -> RangeBounds:
        return self.bounds.get(name, RangeBounds())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "options": {k: list(v) for k, v in self.options.items()},
            "bounds": {k: b.to_dict() for k, b in self.bounds.items()},
        }


def _observed_max(records: Sequence[Mapping[str, Any]], name: str) -> float:
    values = [to_number(field_value(r, name)) for r in records]
    finite = [v for v in values if math.isfinite(v)]
    # Empty catalogue: a max of 0 means no numeric filtering is possible.
    return max(finite) if finite else 0.0


def build_facets(
    records: Sequence[Mapping[str, Any]],
    multi_select_fields: Iterable[str],
    range_fields: Iterable[str],
) -> FacetCatalog:
    """Collect filter options and range bounds.

    Option lists flatten set-valued fields and keep first-encounter order.
    Range bounds use a fixed floor of 0 and the largest finite observed value;
    ``margin_percent`` is derived per record and records with a zero price
    contribute nothing.
    """
    options = {name: distinct_values(records, name) for name in multi_select_fields}
    bounds = {
        name: RangeBounds(min=0.0, max=_observed_max(records, name))
        for name in range_fields
    }
    return FacetCatalog(options=options, bounds=bounds)


__all__ = ["FacetCatalog", "RangeBounds", "build_facets"]
