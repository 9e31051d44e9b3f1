import json

import pytest

from routepack.catalog import (
    DomainListSource,
    JsonFeedSource,
    RouteListSource,
    ServiceEntry,
)
from routepack.sources import make_source_resolver

ASSETS = {
    "/bat/tiktok.bat": "\n".join([
        "route add 2.16.0.0 mask 255.255.0.0 0.0.0.0",
        "route add 2.16.0.0 mask 255.255.0.0 0.0.0.0",
        "route add 18.66.0.0 mask 255.255.0.0 0.0.0.0",
    ]),
    "/bat/youtube.bat": "\n".join([
        "route add 2.16.0.0 mask 255.255.0.0 0.0.0.0",
        "route add 20.0.0.0 mask 255.0.0.0 0.0.0.0",
    ]),
    "/bat/youtube-extra.bat": "route add 21.0.0.0 mask 255.0.0.0 0.0.0.0\ngarbage",
    "/bat/telegram.bat": "route add 91.108.4.0 mask 255.255.252.0 0.0.0.0",
    "/bat/empty.bat": "",
}


def make_service(service_id, name=None, category="video", restriction_type="rkn_blocked", sources=None):
    return ServiceEntry(
        id=service_id,
        name=name or service_id.title(),
        category=category,
        restriction_type=restriction_type,
        sources=list(sources or []),
    )


@pytest.fixture
def resolver():
    return make_source_resolver(ASSETS)


@pytest.fixture
def services():
    return [
        make_service("tiktok", "TikTok", restriction_type="region_not_supported",
                     sources=[RouteListSource("/bat/tiktok.bat")]),
        make_service("youtube", "YouTube", sources=[
            RouteListSource("/bat/youtube.bat"),
            DomainListSource("/domains/youtube.txt"),
            RouteListSource("bat/youtube-extra.bat"),
        ]),
        make_service("telegram", "Telegram", category="messenger", sources=[
            JsonFeedSource("https://example.invalid/telegram.json"),
            RouteListSource("/bat/telegram.bat"),
        ]),
        make_service("instagram", "Instagram", category="social", sources=[
            RouteListSource("/bat/missing.bat"),
        ]),
        make_service("notion", "Notion", category="productivity",
                     restriction_type="region_not_supported"),
    ]


@pytest.fixture
def catalog_file(tmp_path):
    data = [
        {
            "id": "youtube",
            "name": "YouTube",
            "category": "video",
            "restrictionType": "rkn_blocked",
            "sources": [
                {"kind": "ip_routes_bat", "path": "/bat/youtube.bat"},
                {"kind": "domain_list_txt", "path": "/domains/youtube.txt"},
            ],
        },
        {
            "id": "gemini",
            "name": "Gemini",
            "category": "ai",
            "restrictionType": "region_not_supported",
            "sources": [{"kind": "ip_routes_bat", "path": "/bat/gemini.bat"}],
        },
        {
            "id": "telegram",
            "name": "Telegram",
            "category": "messenger",
            "restrictionType": "rkn_blocked",
            "sources": [{"kind": "json_feed", "url": "https://example.invalid/t.json"}],
        },
    ]
    path = tmp_path / "services.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path
