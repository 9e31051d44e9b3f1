"""
Route list parser for Windows `route add` batch files.

Line format:
    route add <A.B.C.D> mask <A.B.C.D> 0.0.0.0
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from .ip import ip_to_number

ROUTE_LINE_PATTERN = re.compile(
    r"route\s+add\s+([0-9]{1,3}(?:\.[0-9]{1,3}){3})"
    r"\s+mask\s+([0-9]{1,3}(?:\.[0-9]{1,3}){3})"
    r"\s+0\.0\.0\.0",
    re.IGNORECASE,
)

_LINE_BREAK = re.compile(r"\r?\n")
_WHITESPACE_RUN = re.compile(r"\s+")


@dataclass(frozen=True)
class RouteEntry:
    """Parsed static route (destination + mask)"""
    ip: str
    mask: str
    ip_num: int
    mask_num: int
    key: str  # "ip|mask"


def make_route(ip: str, mask: str) -> Optional[RouteEntry]:
    ip_num = ip_to_number(ip)
    mask_num = ip_to_number(mask)
    if ip_num is None or mask_num is None:
        return None
    return RouteEntry(
        ip=ip,
        mask=mask,
        ip_num=ip_num,
        mask_num=mask_num,
        key=f"{ip}|{mask}",
    )


def route_sort_key(route: RouteEntry) -> Tuple[int, int, str]:
    """Canonical order: numeric ip, then numeric mask, then key."""
    return route.ip_num, route.mask_num, route.key


def sort_routes(routes: Iterable[RouteEntry]) -> List[RouteEntry]:
    return sorted(routes, key=route_sort_key)


class RouteParser:
    """Parser for route lists"""

    @staticmethod
    def normalize_line(line: str) -> str:
        return _WHITESPACE_RUN.sub(" ", line.strip())

    @staticmethod
    def parse_line(line: str) -> Optional[RouteEntry]:
        """
        Parse a single line.
        Anything that is not a well-formed `route add` with gateway 0.0.0.0
        (or has an octet > 255) gives None.
        """
        normalized = RouteParser.normalize_line(line)
        if not normalized:
            return None

        match = ROUTE_LINE_PATTERN.fullmatch(normalized)
        if not match:
            return None

        ip, mask = match.groups()
        return make_route(ip, mask)

    @staticmethod
    def parse_text(raw: str) -> List[RouteEntry]:
        """
        Parse whole .bat text into a deduplicated, canonically sorted list.
        Плохие строки молча пропускаются: списки ведут третьи лица.
        """
        deduped: Dict[str, RouteEntry] = {}
        for line in _LINE_BREAK.split(raw):
            route = RouteParser.parse_line(line)
            if route is None:
                continue
            deduped[route.key] = route
        return sort_routes(deduped.values())

    @staticmethod
    def rebuild_line(route: RouteEntry) -> str:
        """RouteEntry -> `route add` line"""
        return f"route add {route.ip} mask {route.mask} 0.0.0.0"


def parse_routes(raw: str) -> List[RouteEntry]:
    return RouteParser.parse_text(raw)
