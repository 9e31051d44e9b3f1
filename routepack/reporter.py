"""
Reporter:
- собирает markdown-отчёт по экспорту маршрутов
- сохраняет в out/report.md
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List

from .catalog import ServiceEntry
from .parser import RouteEntry


class Reporter:
    def __init__(self, out_path: str = "out/report.md"):
        self.out_path = Path(out_path)

    def generate(
        self,
        services: List[ServiceEntry],
        routes: List[RouteEntry],
        merge_stats: Dict,
        route_counts: Dict[str, int],
    ) -> str:
        ts = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        lines: List[str] = []

        lines.append("# Route Export Report")
        lines.append("")
        lines.append(f"- Generated at: **{ts}**")
        lines.append(f"- Selected services: **{len(services)}**")
        lines.append(f"- Routes exported: **{len(routes)}**")
        lines.append("")

        lines.append("## Merge stats")
        lines.append("")
        lines.append(f"- Route-list sources used: `{merge_stats.get('sources_used')}`")
        lines.append(f"- Sources skipped (not route lists): `{merge_stats.get('sources_skipped')}`")
        lines.append(f"- Sources missing: `{merge_stats.get('sources_missing')}`")
        lines.append(f"- Routes before dedup: `{merge_stats.get('routes_before')}`")
        lines.append(f"- Dropped as duplicates: `{merge_stats.get('dropped_dup')}`")
        lines.append(f"- After: `{merge_stats.get('after')}`")
        lines.append("")

        lines.append("## Services")
        lines.append("")
        if not services:
            lines.append("_No services selected_")
        else:
            lines.append("| Service | Category | Restriction | Routes |")
            lines.append("|---------|----------|-------------|--------|")
            for service in services:
                lines.append(
                    f"| {service.name} (`{service.id}`) | {service.category} | "
                    f"{service.restriction_label} | {route_counts.get(service.id, 0)} |"
                )

        report = "\n".join(lines) + "\n"
        self.out_path.parent.mkdir(parents=True, exist_ok=True)
        self.out_path.write_text(report, encoding="utf-8")
        return report
