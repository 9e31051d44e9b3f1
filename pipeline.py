#!/usr/bin/env python3
"""
pipeline.py
Оркестратор экспорта маршрутов.

Шаги:
  1. Catalog   — загрузить data/services.json
  2. Assets    — прочитать bat/*.bat в память
  3. Select    — выбрать сервисы (явный список или все видимые по фильтрам)
  4. Merge     — разобрать, дедуплицировать и отсортировать маршруты
  5. Repack    — записать out/routes.bat
  6. Report    — markdown summary → out/report.md
"""

from __future__ import annotations

import sys
import time
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from routepack.catalog import CatalogError, ServiceEntry, load_services
from routepack.filters import ServiceFilter
from routepack.merger import merge_routes
from routepack.parser import RouteEntry
from routepack.registry import ServiceRegistry
from routepack.repacker import Repacker
from routepack.reporter import Reporter
from routepack.sources import load_route_assets, make_source_resolver


class RouteExportPipeline:

    def __init__(
        self,
        config_path: str = "config.yaml",
        service_ids: Optional[Sequence[str]] = None,
        output: Optional[str] = None,
    ):
        self.config_path = config_path
        self.config = self._load_config()

        app = self.config.get("app", {}) or {}
        self.debug = app.get("debug", False)

        catalog_cfg = self.config.get("catalog", {}) or {}
        self.catalog_path = Path(catalog_cfg.get("path", "data/services.json"))

        sources_cfg = self.config.get("sources", {}) or {}
        self.bat_dir = Path(sources_cfg.get("bat_dir", "bat"))
        self.bat_pattern = sources_cfg.get("pattern", "*.bat")

        selection_cfg = self.config.get("selection", {}) or {}
        self.service_ids: List[str] = list(
            service_ids or selection_cfg.get("services", []) or []
        )
        self.select_all_visible = selection_cfg.get("all_visible", False)

        self.output = Path(output) if output else None

        out_cfg = self.config.get("output", {}) or {}
        try:
            self.repacker = Repacker(self.config)
        except ValueError as exc:
            print(f"Error in config: {exc}")
            sys.exit(1)
        self.reporter = Reporter(
            str(Path(out_cfg.get("base_path", "./out")) / out_cfg.get("report", "report.md"))
        )
        self.service_filter = ServiceFilter.from_config(self.config)

        self.services: List[ServiceEntry] = []
        self.assets: Dict[str, str] = {}
        self.registry: Optional[ServiceRegistry] = None
        self.routes: List[RouteEntry] = []

    def run(self) -> int:
        t_start = time.monotonic()
        self._banner("Route Export Pipeline")

        if not self._step1_catalog():
            return 1
        self._step2_assets()
        if not self._step3_select():
            return 1
        merge_stats = self._step4_merge()
        self._step5_repack()
        self._step6_report(merge_stats)

        elapsed = time.monotonic() - t_start
        self._banner(f"Done in {elapsed:.1f}s  |  {len(self.routes)} routes")
        return 0

    # ── шаг 1: Catalog ───────────────────────────────────────

    def _step1_catalog(self) -> bool:
        print("\n[1/6] Loading catalog...")
        try:
            self.services = load_services(self.catalog_path)
        except CatalogError as exc:
            print(f"    ! {exc}")
            return False
        print(f"    → services: {len(self.services)}")
        return True

    # ── шаг 2: Assets ────────────────────────────────────────

    def _step2_assets(self) -> None:
        print("\n[2/6] Loading route lists...")
        self.assets = load_route_assets(self.bat_dir, self.bat_pattern, debug=self.debug)
        self.registry = ServiceRegistry(
            self.services,
            make_source_resolver(self.assets),
            service_filter=self.service_filter,
        )
        print(f"    → route lists: {len(self.assets)} from {self.bat_dir}/")

    # ── шаг 3: Select ────────────────────────────────────────

    def _step3_select(self) -> bool:
        print("\n[3/6] Selecting services...")
        registry = self.registry
        known = {s.id for s in registry.all_services}

        for service_id in self.service_ids:
            if service_id not in known:
                print(f"    ! unknown service id: {service_id}")
                continue
            registry.set_service_selection(service_id, True)

        if not self.service_ids and self.select_all_visible:
            if self.debug:
                print(
                    f"    search={self.service_filter.search!r}  "
                    f"categories={self.service_filter.categories}  "
                    f"restrictions={self.service_filter.restriction_types}"
                )
            registry.select_all_visible()

        selected = registry.selected_services
        if not selected:
            print("    ! No services selected (use --service or selection.all_visible)")
            return False

        print(f"    → selected: {', '.join(s.id for s in selected)}")
        return True

    # ── шаг 4: Merge ─────────────────────────────────────────

    def _step4_merge(self) -> dict:
        print("\n[4/6] Merging routes...")
        self.routes, stats = self.registry.merger.merge(self.registry.selected_services)
        print(
            f"    → sources used: {stats['sources_used']}  "
            f"missing: {stats['sources_missing']}  "
            f"dup dropped: {stats['dropped_dup']}  "
            f"routes: {stats['after']}"
        )
        return stats

    # ── шаг 5: Repack ────────────────────────────────────────

    def _step5_repack(self) -> None:
        print("\n[5/6] Writing route file...")
        per_service = None
        if self.repacker.split_by_service:
            resolver = self.registry.merger.resolve_source_text
            per_service = {
                s.id: merge_routes([s], resolver) for s in self.registry.selected_services
            }
        self.repacker.repack(self.routes, per_service=per_service, output_path=self.output)

    # ── шаг 6: Report ────────────────────────────────────────

    def _step6_report(self, merge_stats: dict) -> None:
        print("\n[6/6] Generating report...")
        selected = self.registry.selected_services
        counts = {s.id: self.registry.route_count_for_service(s.id) for s in selected}
        self.reporter.generate(
            services=selected,
            routes=self.routes,
            merge_stats=merge_stats,
            route_counts=counts,
        )
        print(f"    → report saved to {self.reporter.out_path}")

    # ── утилиты ──────────────────────────────────────────────

    def _load_config(self) -> dict:
        try:
            with open(self.config_path, encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except FileNotFoundError:
            print(f"Error: config file '{self.config_path}' not found")
            sys.exit(1)
        except yaml.YAMLError as exc:
            print(f"Error parsing config: {exc}")
            sys.exit(1)

    @staticmethod
    def _banner(text: str) -> None:
        print("\n" + "=" * 60)
        print(f"  {text}")
        print("=" * 60)


def main(argv: Optional[Sequence[str]] = None) -> int:
    import argparse

    ap = argparse.ArgumentParser(description="Merge per-service route lists into one .bat")
    ap.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    ap.add_argument(
        "--service",
        action="append",
        dest="services",
        metavar="ID",
        help="Service id to include (repeatable); overrides selection.services",
    )
    ap.add_argument("--output", help="Output .bat path (default: output.base_path/output.filename)")
    args = ap.parse_args(argv)

    pipeline = RouteExportPipeline(
        config_path=args.config,
        service_ids=args.services,
        output=args.output,
    )
    return pipeline.run()


if __name__ == "__main__":
    raise SystemExit(main())
