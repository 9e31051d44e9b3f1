"""
ServiceRegistry: каталог + фильтры + выбранные сервисы.

Всё, что нужно экспортёру: какие сервисы видны, какие выбраны,
и итоговый список маршрутов по выбранным.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .catalog import RESTRICTION_TYPES, ServiceEntry
from .filters import ServiceFilter
from .merger import RouteMerger
from .parser import RouteEntry
from .repacker import format_routes
from .sources import ResolveSourceText


def _with_added(values: List[str], value: str) -> List[str]:
    if value in values:
        return values
    return [*values, value]


def _with_removed(values: List[str], value: str) -> List[str]:
    return [v for v in values if v != value]


class ServiceRegistry:
    def __init__(
        self,
        services: Iterable[ServiceEntry],
        resolve_source_text: ResolveSourceText,
        service_filter: Optional[ServiceFilter] = None,
    ):
        self.all_services: List[ServiceEntry] = sorted(
            services, key=lambda s: (s.name.lower(), s.name)
        )
        self.merger = RouteMerger(resolve_source_text)
        self.filter = service_filter or ServiceFilter()
        self.selected_service_ids: List[str] = []

        self._route_counts: Optional[Dict[str, int]] = None

    # ── фильтры ──────────────────────────────────────────────

    @property
    def search_query(self) -> str:
        return self.filter.search

    @search_query.setter
    def search_query(self, value: str) -> None:
        self.filter.search = value or ""

    @property
    def selected_categories(self) -> List[str]:
        return list(self.filter.categories)

    @property
    def selected_restriction_types(self) -> List[str]:
        return list(self.filter.restriction_types)

    @property
    def all_categories(self) -> List[str]:
        return sorted({s.category for s in self.all_services})

    @property
    def restriction_options(self) -> List[str]:
        return list(RESTRICTION_TYPES)

    @property
    def filtered_services(self) -> List[ServiceEntry]:
        filtered, _ = self.filter.apply(self.all_services)
        return filtered

    @property
    def has_active_filters(self) -> bool:
        return self.filter.is_active

    def set_category_selection(self, category: str, selected: bool) -> None:
        self.filter.categories = (
            _with_added(self.filter.categories, category)
            if selected
            else _with_removed(self.filter.categories, category)
        )

    def set_restriction_selection(self, restriction_type: str, selected: bool) -> None:
        self.filter.restriction_types = (
            _with_added(self.filter.restriction_types, restriction_type)
            if selected
            else _with_removed(self.filter.restriction_types, restriction_type)
        )

    def clear_filters(self) -> None:
        self.filter.search = ""
        self.filter.categories = []
        self.filter.restriction_types = []

    # ── выбор сервисов ───────────────────────────────────────

    def is_service_selected(self, service_id: str) -> bool:
        return service_id in self.selected_service_ids

    def set_service_selection(self, service_id: str, selected: bool) -> None:
        self.selected_service_ids = (
            _with_added(self.selected_service_ids, service_id)
            if selected
            else _with_removed(self.selected_service_ids, service_id)
        )

    def toggle_service_selection(self, service_id: str) -> None:
        self.set_service_selection(service_id, not self.is_service_selected(service_id))

    def select_all_visible(self) -> None:
        """Add every currently visible service; already selected ones stay."""
        selected = list(self.selected_service_ids)
        for service in self.filtered_services:
            if service.id not in selected:
                selected.append(service.id)
        self.selected_service_ids = selected

    def clear_selection(self) -> None:
        self.selected_service_ids = []

    @property
    def selected_services(self) -> List[ServiceEntry]:
        if not self.selected_service_ids:
            return []
        ids = set(self.selected_service_ids)
        return [s for s in self.all_services if s.id in ids]

    # ── маршруты ─────────────────────────────────────────────

    def merged_routes(self) -> List[RouteEntry]:
        routes, _ = self.merger.merge(self.selected_services)
        return routes

    def merged_routes_text(self) -> str:
        return format_routes(self.merged_routes())

    def route_count_for_service(self, service_id: str) -> int:
        if self._route_counts is None:
            self._route_counts = self.merger.counts_by_service(self.all_services)
        return self._route_counts.get(service_id, 0)
