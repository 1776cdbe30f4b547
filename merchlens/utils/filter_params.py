# filter_params.py
import math
from dataclasses import dataclass, field, replace
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Literal, Optional, Sequence, Tuple, Union

from merchlens.services.facets import FacetCatalog
from merchlens.utils.fields import as_set, field_value, render_value, to_number

FilterKind = Literal["categorical", "range"]

# Toggling this value selects "all", i.e. clears the field's selection.
ALL = "__ALL__"

Record = Mapping[str, Any]


def _key(value: Any) -> str:
    # Query arguments arrive as strings; compare categorical values that way.
    return render_value(value) or ""


@dataclass(frozen=True)
class CategoricalFilter:
    """Multi-select entry. No accepted values means no restriction."""

    field: str
    accepted: Tuple[Any, ...] = ()
    kind: ClassVar[FilterKind] = "categorical"

    @property
    def value(self) -> List[Any]:
        return list(self.accepted)

    @property
    def is_active(self) -> bool:
        return bool(self.accepted)

    def matches(self, record: Record) -> bool:
        if not self.accepted:
            return True
        wanted = {_key(v) for v in self.accepted}
        return any(_key(v) in wanted for v in as_set(record.get(self.field)))

    def toggle(self, value: Any) -> "CategoricalFilter":
        if value == ALL:
            return self.cleared()
        if _key(value) in {_key(v) for v in self.accepted}:
            return self.without(value)
        return replace(self, accepted=self.accepted + (value,))

    def without(self, value: Any) -> "CategoricalFilter":
        kept = tuple(v for v in self.accepted if _key(v) != _key(value))
        return replace(self, accepted=kept)

    def cleared(self) -> "CategoricalFilter":
        return replace(self, accepted=())

    def chips(self) -> List[Dict[str, Any]]:
        return [{"field": self.field, "kind": self.kind, "value": v} for v in self.accepted]


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive numeric range; non-finite values never match an active range.

    ``default_min``/``default_max`` hold the facet bounds the entry was created
    from. While the range still equals them it imposes no restriction.
    """

    field: str
    min: float = 0.0
    max: float = 0.0
    default_min: Optional[float] = None
    default_max: Optional[float] = None
    kind: ClassVar[FilterKind] = "range"

    @property
    def value(self) -> Dict[str, float]:
        return {"min": self.min, "max": self.max}

    @property
    def is_active(self) -> bool:
        if self.default_min is None or self.default_max is None:
            return True
        return (self.min, self.max) != (self.default_min, self.default_max)

    def matches(self, record: Record) -> bool:
        if not self.is_active:
            return True
        number = to_number(field_value(record, self.field))
        # NaN fails both comparisons
        return self.min <= number <= self.max

    def bounded(self, low: Optional[float] = None, high: Optional[float] = None) -> "RangeFilter":
        return replace(
            self,
            min=self.min if low is None else to_number(low),
            max=self.max if high is None else to_number(high),
        )

    def without(self, value: Any = None) -> "RangeFilter":
        return self.cleared()

    def cleared(self) -> "RangeFilter":
        if self.default_min is None or self.default_max is None:
            return self
        return replace(self, min=self.default_min, max=self.default_max)

    def chips(self) -> List[Dict[str, Any]]:
        if not self.is_active:
            return []
        return [{"field": self.field, "kind": self.kind, "value": f"{self.min:g} - {self.max:g}"}]


FilterEntry = Union[CategoricalFilter, RangeFilter]


@dataclass(frozen=True)
class FilterCriteria:
    search: str = ""
    entries: Tuple[FilterEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_facets(cls, facets: FacetCatalog, search: str = "") -> "FilterCriteria":
        """Default criteria: no selections, every range at its full bounds."""
        entries: List[FilterEntry] = [CategoricalFilter(name) for name in facets.options]
        for name, bounds in facets.bounds.items():
            entries.append(
                RangeFilter(
                    name,
                    min=bounds.min,
                    max=bounds.max,
                    default_min=bounds.min,
                    default_max=bounds.max,
                )
            )
        return cls(search=search, entries=tuple(entries))

    # -------- evaluation --------
    def matches(self, record: Record) -> bool:
        if not self._matches_search(record):
            return False
        return all(entry.matches(record) for entry in self.entries)

    def apply(self, records: Iterable[Record]) -> List[Record]:
        """
        Return the records that satisfy every entry, in their input order.

        INTERSECTION (AND) across:
          - the search text (OR across fields, case-insensitive)
          - every categorical entry (OR within its accepted values)
          - every range entry (inclusive)
        """
        return [r for r in records if self.matches(r)]

    def _matches_search(self, record: Record) -> bool:
        needle = (self.search or "").lower()
        if not needle:
            return True
        for value in record.values():
            rendered = render_value(value)
            if rendered is not None and needle in rendered.lower():
                return True
        return False

    # -------- state transitions --------
    def entry(self, name: str) -> Optional[FilterEntry]:
        for e in self.entries:
            if e.field == name:
                return e
        return None

    def _with_entry(self, new: FilterEntry) -> "FilterCriteria":
        if self.entry(new.field) is None:
            return replace(self, entries=self.entries + (new,))
        entries = tuple(new if e.field == new.field else e for e in self.entries)
        return replace(self, entries=entries)

    def with_search(self, search: str) -> "FilterCriteria":
        return replace(self, search=search or "")

    def with_selection(self, name: str, values: Iterable[Any]) -> "FilterCriteria":
        return self._with_entry(CategoricalFilter(name, tuple(values)))

    def toggle_value(self, name: str, value: Any) -> "FilterCriteria":
        current = self.entry(name)
        if not isinstance(current, CategoricalFilter):
            current = CategoricalFilter(name)
        return self._with_entry(current.toggle(value))

    def with_range(self, name: str, low: Optional[float] = None, high: Optional[float] = None) -> "FilterCriteria":
        current = self.entry(name)
        if not isinstance(current, RangeFilter):
            current = RangeFilter(name, min=-math.inf, max=math.inf)
        return self._with_entry(current.bounded(low, high))

    def remove_value(self, name: str, value: Any = None) -> "FilterCriteria":
        current = self.entry(name)
        if current is None:
            return self
        return self._with_entry(current.without(value))

    def clear(self) -> "FilterCriteria":
        return replace(self, search="", entries=tuple(e.cleared() for e in self.entries))

    # -------- presentation hand-off --------
    @property
    def is_empty(self) -> bool:
        return not self.search and not any(e.is_active for e in self.entries)

    def chips(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for e in self.entries:
            out.extend(e.chips())
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "search": self.search,
            "entries": [{"field": e.field, "kind": e.kind, "value": e.value} for e in self.entries],
        }


def evaluate(records: Sequence[Record], criteria: FilterCriteria) -> List[Record]:
    """Order-preserving filter of ``records`` by ``criteria``."""
    return criteria.apply(records)


__all__ = [
    "ALL",
    "CategoricalFilter",
    "FilterCriteria",
    "FilterEntry",
    "FilterKind",
    "RangeFilter",
    "evaluate",
]
