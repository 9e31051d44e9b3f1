"""
ServiceFilter:
- поиск по подстроке в имени (без учёта регистра)
- фильтр по категориям
- фильтр по типу ограничения (rkn_blocked / region_not_supported)
Пустой фильтр пропускает всё.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .catalog import ServiceEntry


@dataclass
class FilterStats:
    before: int = 0
    dropped_search: int = 0
    dropped_filter: int = 0
    after: int = 0

    def to_dict(self) -> Dict:
        return {
            "before": self.before,
            "dropped_search": self.dropped_search,
            "dropped_filter": self.dropped_filter,
            "after": self.after,
        }


def normalize_query(query: str) -> str:
    return (query or "").strip().lower()


@dataclass
class ServiceFilter:
    search: str = ""
    categories: List[str] = field(default_factory=list)
    restriction_types: List[str] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Dict) -> "ServiceFilter":
        filters_cfg = (config or {}).get("filters", {}) or {}
        return cls(
            search=filters_cfg.get("search") or "",
            categories=list(filters_cfg.get("categories", []) or []),
            restriction_types=list(filters_cfg.get("restriction_types", []) or []),
        )

    @property
    def is_active(self) -> bool:
        return bool(normalize_query(self.search) or self.categories or self.restriction_types)

    def matches_search(self, service: ServiceEntry) -> bool:
        query = normalize_query(self.search)
        return not query or query in service.name.lower()

    def matches_filters(self, service: ServiceEntry) -> bool:
        if self.categories and service.category not in self.categories:
            return False
        if self.restriction_types and service.restriction_type not in self.restriction_types:
            return False
        return True

    def matches(self, service: ServiceEntry) -> bool:
        return self.matches_search(service) and self.matches_filters(service)

    def apply(self, services: Iterable[ServiceEntry]) -> Tuple[List[ServiceEntry], Dict]:
        """Order of `services` is kept."""
        stats = FilterStats()
        result: List[ServiceEntry] = []

        for service in services:
            stats.before += 1
            if not self.matches_search(service):
                stats.dropped_search += 1
                continue
            if not self.matches_filters(service):
                stats.dropped_filter += 1
                continue
            result.append(service)

        stats.after = len(result)
        return result, stats.to_dict()
