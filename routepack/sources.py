"""
Bundled .bat assets:
- читаем все bat/*.bat один раз на старте в явный dict path -> text
- resolver для ip_routes_bat источников поверх этого dict
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Union

from .catalog import RouteListSource

ResolveSourceText = Callable[[RouteListSource], Optional[str]]


def normalize_source_path(path: str) -> str:
    return path if path.startswith("/") else f"/{path}"


def load_route_assets(
    directory: Union[str, Path],
    pattern: str = "*.bat",
    debug: bool = False,
) -> Dict[str, str]:
    """
    Read every matching file in `directory`.
    Keys look like catalog paths: bat/youtube.bat -> "/bat/youtube.bat".
    """
    directory = Path(directory)
    assets: Dict[str, str] = {}

    if not directory.is_dir():
        print(f"    ! assets dir {directory} missing")
        return assets

    for path in sorted(directory.glob(pattern)):
        if not path.is_file():
            continue
        try:
            text = path.read_text(encoding="utf-8", errors="ignore")
        except OSError as exc:
            print(f"    ! Cannot read {path.name}: {exc}")
            continue

        key = normalize_source_path(f"{directory.name}/{path.name}")
        assets[key] = text
        if debug:
            print(f"      {key}: {len(text.splitlines())} lines")

    return assets


def make_source_resolver(assets: Mapping[str, str]) -> ResolveSourceText:
    """Resolver over a preloaded asset map; unknown paths give None."""

    def resolve(source: RouteListSource) -> Optional[str]:
        return assets.get(normalize_source_path(source.path))

    return resolve
