import json

import pytest

from routepack.catalog import (
    CatalogError,
    DomainListSource,
    JsonFeedSource,
    RouteListSource,
    SourceKind,
    load_services,
    service_from_dict,
    source_from_dict,
)


def test_load_services(catalog_file):
    services = load_services(catalog_file)

    assert [s.id for s in services] == ["youtube", "gemini", "telegram"]
    youtube = services[0]
    assert youtube.sources == [
        RouteListSource("/bat/youtube.bat"),
        DomainListSource("/domains/youtube.txt"),
    ]
    assert youtube.sources[0].kind is SourceKind.IP_ROUTES_BAT
    assert services[1].restriction_label == "Service doesn't support Russia"
    assert services[2].sources == [JsonFeedSource("https://example.invalid/t.json")]


def test_unknown_source_kind():
    with pytest.raises(CatalogError, match="unknown source kind"):
        source_from_dict({"kind": "ftp", "path": "/x"})


def test_source_missing_payload():
    with pytest.raises(CatalogError):
        source_from_dict({"kind": "json_feed"})


BASE_ENTRY = {"id": "x", "name": "X", "category": "video", "restrictionType": "rkn_blocked"}


@pytest.mark.parametrize("patch, message", [
    ({"category": "cooking"}, "unknown category"),
    ({"restrictionType": "banned"}, "unknown restriction type"),
    ({"sources": [{"kind": "ftp"}]}, "service 'x': unknown source kind"),
])
def test_invalid_service(patch, message):
    with pytest.raises(CatalogError, match=message):
        service_from_dict({**BASE_ENTRY, **patch})


def test_service_missing_field():
    data = dict(BASE_ENTRY)
    del data["name"]
    with pytest.raises(CatalogError, match="missing field"):
        service_from_dict(data)


def test_service_without_sources():
    service = service_from_dict(dict(BASE_ENTRY))
    assert service.sources == []


def test_load_services_errors(tmp_path):
    with pytest.raises(CatalogError, match="not found"):
        load_services(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(CatalogError, match="invalid JSON"):
        load_services(broken)

    not_list = tmp_path / "object.json"
    not_list.write_text("{}", encoding="utf-8")
    with pytest.raises(CatalogError, match="array"):
        load_services(not_list)


def test_duplicate_ids(tmp_path):
    path = tmp_path / "dup.json"
    path.write_text(json.dumps([BASE_ENTRY, BASE_ENTRY]), encoding="utf-8")
    with pytest.raises(CatalogError, match="duplicate"):
        load_services(path)


@pytest.mark.parametrize("patch, message", [
    ({"name": None}, "name must be a non-empty string"),
    ({"name": 42}, "name must be a non-empty string"),
    ({"name": ""}, "name must be a non-empty string"),
    ({"id": 7}, "service id must be a string"),
    ({"sources": "bat/x.bat"}, "sources must be a list"),
])
def test_service_field_types(patch, message):
    with pytest.raises(CatalogError, match=message):
        service_from_dict({**BASE_ENTRY, **patch})


@pytest.mark.parametrize("source", [
    {"kind": "ip_routes_bat", "path": None},
    {"kind": "ip_routes_bat", "path": ""},
    {"kind": "domain_list_txt", "path": ["a"]},
    {"kind": "json_feed", "url": 1},
])
def test_source_payload_must_be_string(source):
    with pytest.raises(CatalogError, match="must be a non-empty string"):
        source_from_dict(source)


def test_null_source_path_fails_at_load(tmp_path):
    path = tmp_path / "services.json"
    path.write_text(
        json.dumps([{**BASE_ENTRY, "sources": [{"kind": "ip_routes_bat", "path": None}]}]),
        encoding="utf-8",
    )
    with pytest.raises(CatalogError, match="service 'x'"):
        load_services(path)


def test_load_services_not_utf8(tmp_path):
    path = tmp_path / "services.json"
    path.write_bytes(b"\xff\xfe[")
    with pytest.raises(CatalogError, match="not valid UTF-8"):
        load_services(path)


def test_load_services_directory(tmp_path):
    with pytest.raises(CatalogError, match="cannot read catalog"):
        load_services(tmp_path)
