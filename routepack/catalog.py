"""
Service catalog:
- source descriptors (ip_routes_bat / domain_list_txt / json_feed)
- ServiceEntry
- loading the catalog from data/services.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union


class CatalogError(ValueError):
    """Malformed catalog file or entry"""


class SourceKind(str, Enum):
    IP_ROUTES_BAT = "ip_routes_bat"
    DOMAIN_LIST_TXT = "domain_list_txt"
    JSON_FEED = "json_feed"


RESTRICTION_TYPES = ("rkn_blocked", "region_not_supported")

RESTRICTION_TYPE_LABELS = {
    "rkn_blocked": "Blocked by Roskomnadzor",
    "region_not_supported": "Service doesn't support Russia",
}

SERVICE_CATEGORIES = (
    "adult",
    "ai",
    "anime",
    "developer",
    "education",
    "email",
    "messenger",
    "music",
    "productivity",
    "social",
    "tools",
    "torrent",
    "translation",
    "video",
    "vpn",
)


@dataclass(frozen=True)
class RouteListSource:
    path: str
    kind: SourceKind = field(default=SourceKind.IP_ROUTES_BAT, init=False)


@dataclass(frozen=True)
class DomainListSource:
    path: str
    kind: SourceKind = field(default=SourceKind.DOMAIN_LIST_TXT, init=False)


@dataclass(frozen=True)
class JsonFeedSource:
    url: str
    kind: SourceKind = field(default=SourceKind.JSON_FEED, init=False)


ServiceSource = Union[RouteListSource, DomainListSource, JsonFeedSource]


@dataclass
class ServiceEntry:
    id: str
    name: str
    category: str
    restriction_type: str
    sources: List[ServiceSource] = field(default_factory=list)

    @property
    def restriction_label(self) -> str:
        return RESTRICTION_TYPE_LABELS.get(self.restriction_type, self.restriction_type)


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise CatalogError(f"{what} must be a non-empty string, got {value!r}")
    return value


def source_from_dict(data: Dict[str, Any]) -> ServiceSource:
    if not isinstance(data, dict):
        raise CatalogError(f"source must be an object, got {data!r}")
    kind = data.get("kind")
    try:
        if kind == SourceKind.IP_ROUTES_BAT.value:
            return RouteListSource(path=_require_str(data["path"], f"{kind} path"))
        if kind == SourceKind.DOMAIN_LIST_TXT.value:
            return DomainListSource(path=_require_str(data["path"], f"{kind} path"))
        if kind == SourceKind.JSON_FEED.value:
            return JsonFeedSource(url=_require_str(data["url"], f"{kind} url"))
    except KeyError as exc:
        raise CatalogError(f"source of kind {kind!r} is missing {exc.args[0]!r}") from exc
    raise CatalogError(f"unknown source kind: {kind!r}")


def service_from_dict(data: Dict[str, Any]) -> ServiceEntry:
    if not isinstance(data, dict):
        raise CatalogError(f"service entry must be an object, got {data!r}")
    service_id = data.get("id")
    if not service_id:
        raise CatalogError(f"service without id: {data!r}")
    if not isinstance(service_id, str):
        raise CatalogError(f"service id must be a string, got {service_id!r}")

    try:
        name = data["name"]
        category = data["category"]
        restriction_type = data["restrictionType"]
    except KeyError as exc:
        raise CatalogError(f"service {service_id!r}: missing field {exc.args[0]!r}") from exc

    try:
        _require_str(name, "name")
    except CatalogError as exc:
        raise CatalogError(f"service {service_id!r}: {exc}") from exc
    if category not in SERVICE_CATEGORIES:
        raise CatalogError(f"service {service_id!r}: unknown category {category!r}")
    if restriction_type not in RESTRICTION_TYPES:
        raise CatalogError(
            f"service {service_id!r}: unknown restriction type {restriction_type!r}"
        )

    raw_sources = data.get("sources") or []
    if not isinstance(raw_sources, list):
        raise CatalogError(f"service {service_id!r}: sources must be a list")
    try:
        sources = [source_from_dict(s) for s in raw_sources]
    except CatalogError as exc:
        raise CatalogError(f"service {service_id!r}: {exc}") from exc

    return ServiceEntry(
        id=service_id,
        name=name,
        category=category,
        restriction_type=restriction_type,
        sources=sources,
    )


def load_services(path: Union[str, Path]) -> List[ServiceEntry]:
    """Load services.json (JSON array of service objects)."""
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CatalogError(f"catalog not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise CatalogError(f"{path} is not valid UTF-8: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"invalid JSON in {path}: {exc}") from exc
    except OSError as exc:
        raise CatalogError(f"cannot read catalog {path}: {exc}") from exc

    if not isinstance(data, list):
        raise CatalogError(f"{path}: expected a JSON array of services")

    services = [service_from_dict(item) for item in data]

    seen = set()
    for service in services:
        if service.id in seen:
            raise CatalogError(f"duplicate service id: {service.id!r}")
        seen.add(service.id)

    return services
