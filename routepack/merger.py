"""
RouteMerger:
- для каждого сервиса и каждого его источника берём только ip_routes_bat
- текст источника даёт resolver; None / пустой текст = источника нет, пропускаем
- dedup по RouteEntry.key через все сервисы сразу, затем каноническая сортировка

Результат не зависит от порядка сервисов и порядка источников внутри сервиса.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .catalog import ServiceEntry, SourceKind
from .parser import RouteEntry, parse_routes, sort_routes
from .sources import ResolveSourceText


@dataclass
class MergeStats:
    services: int = 0
    sources_used: int = 0
    sources_skipped: int = 0  # domain lists, remote feeds
    sources_missing: int = 0  # resolver returned nothing
    routes_before: int = 0
    dropped_dup: int = 0
    after: int = 0

    def to_dict(self) -> Dict:
        return {
            "services": self.services,
            "sources_used": self.sources_used,
            "sources_skipped": self.sources_skipped,
            "sources_missing": self.sources_missing,
            "routes_before": self.routes_before,
            "dropped_dup": self.dropped_dup,
            "after": self.after,
        }


def _service_routes(
    service: ServiceEntry,
    resolve_source_text: ResolveSourceText,
    stats: Optional[MergeStats] = None,
) -> Iterator[RouteEntry]:
    for source in service.sources:
        if source.kind is not SourceKind.IP_ROUTES_BAT:
            if stats is not None:
                stats.sources_skipped += 1
            continue

        raw = resolve_source_text(source)
        if not raw:
            if stats is not None:
                stats.sources_missing += 1
            continue

        routes = parse_routes(raw)
        if stats is not None:
            stats.sources_used += 1
            stats.routes_before += len(routes)
        yield from routes


def merge_routes(
    services: Iterable[ServiceEntry],
    resolve_source_text: ResolveSourceText,
) -> List[RouteEntry]:
    merged: Dict[str, RouteEntry] = {}
    for service in services:
        for route in _service_routes(service, resolve_source_text):
            merged[route.key] = route
    return sort_routes(merged.values())


class RouteMerger:
    def __init__(self, resolve_source_text: ResolveSourceText):
        self.resolve_source_text = resolve_source_text

    def merge(self, services: Iterable[ServiceEntry]) -> Tuple[List[RouteEntry], Dict]:
        """Same result as merge_routes() plus stats for the report."""
        stats = MergeStats()
        merged: Dict[str, RouteEntry] = {}

        for service in services:
            stats.services += 1
            for route in _service_routes(service, self.resolve_source_text, stats):
                merged[route.key] = route

        routes = sort_routes(merged.values())
        stats.after = len(routes)
        stats.dropped_dup = stats.routes_before - stats.after
        return routes, stats.to_dict()

    def count_for_service(self, service: ServiceEntry) -> int:
        return len(merge_routes([service], self.resolve_source_text))

    def counts_by_service(self, services: Iterable[ServiceEntry]) -> Dict[str, int]:
        return {s.id: self.count_for_service(s) for s in services}
