"""
Repacker:
- format_routes: RouteEntry[] -> текст `route add ...` (без пересортировки)
- пишет итоговый out/routes.bat
- опционально раскладывает по out/by_service/<id>.bat
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Mapping, Optional

from .parser import RouteEntry, RouteParser

LINE_ENDINGS = {"lf": "\n", "crlf": "\r\n"}


def format_routes(routes: List[RouteEntry]) -> str:
    """One `route add` line per entry, in the given order, no trailing newline."""
    return "\n".join(RouteParser.rebuild_line(route) for route in routes)


class Repacker:
    def __init__(self, config: Dict):
        self.config = config or {}
        out_cfg = self.config.get("output", {}) or {}

        self.base_out = Path(out_cfg.get("base_path", "./out"))
        self.filename = out_cfg.get("filename", "routes.bat")
        self.split_by_service = out_cfg.get("split_by_service", False)

        line_ending = str(out_cfg.get("line_ending", "crlf")).lower()
        if line_ending not in LINE_ENDINGS:
            raise ValueError(f"output.line_ending must be lf or crlf, got {line_ending!r}")
        self.newline = LINE_ENDINGS[line_ending]

    @property
    def output_path(self) -> Path:
        return self.base_out / self.filename

    def render(self, routes: List[RouteEntry]) -> str:
        text = format_routes(routes)
        if not text:
            return ""
        return text.replace("\n", self.newline) + self.newline

    def repack(
        self,
        routes: List[RouteEntry],
        per_service: Optional[Mapping[str, List[RouteEntry]]] = None,
        output_path: Optional[Path] = None,
    ) -> Optional[Path]:
        if not routes:
            print("    ! Repacker: no routes to write")
            return None

        path = output_path or self.output_path
        path.parent.mkdir(parents=True, exist_ok=True)
        # newline="" чтобы \r\n не превратился в \r\r\n на Windows
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(self.render(routes))
        print(f"    - routes: {path} ({len(routes)} lines)")

        if self.split_by_service and per_service:
            # рядом с итоговым файлом, даже если путь переопределён через --output
            by_service_dir = path.parent / "by_service"
            by_service_dir.mkdir(parents=True, exist_ok=True)
            for service_id, service_routes in sorted(per_service.items()):
                if not service_routes:
                    continue
                service_path = by_service_dir / f"{service_id}.bat"
                with open(service_path, "w", encoding="utf-8", newline="") as f:
                    f.write(self.render(service_routes))
                print(f"    - by_service: {service_id} -> {service_path} ({len(service_routes)} lines)")

        return path
