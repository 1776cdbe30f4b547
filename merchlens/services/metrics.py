"""Measure registry utilities."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple


class Metrics:
    """Encapsulate measure mapping and helper routines."""

    def __init__(self, mapping: Dict[str, str]):
        self.mapping = dict(mapping)

    def label(self, key: Optional[str]) -> str:
        if not key:
            return ""
        return self.mapping.get(key, key)

    def validate(self, metric: Optional[str]) -> Optional[str]:
        """Return ``metric`` when it is a configured measure, else None."""
        if not metric:
            return None
        if metric in self.mapping:
            return metric
        return None

    def available(self) -> List[Tuple[str, str]]:
        return list(self.mapping.items())


__all__ = ["Metrics"]
