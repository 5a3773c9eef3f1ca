from __future__ import annotations

import argparse
from pathlib import Path

from loguru import logger

from app.viewmodels.cluster_vm import ClusterVM, build_rows
from app.viewmodels.library_vm import LibraryVM
from core.config import PipelineConfig
from core.models import ClusterResult
from core.services.dbscan import ClusteringParameterError
from core.services.sort_service import ClusterSortService, SortBy
from infrastructure.exif_reader import ExifMetadataReader
from infrastructure.file_scanner import FileScanner, ScanError
from infrastructure.location_history import GoogleLocationHistoryParser, LocationHistoryError
from infrastructure.logging import find_latest_log_file, init_logging
from infrastructure.place_lookup import ReverseGeocodeLookup
from infrastructure.settings import JsonSettings

BASE_DIR = Path(__file__).parent


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="photo-tagger",
        description="Geotag photos from a location history and cluster them by place and time.",
    )
    parser.add_argument("folder", help="Folder to scan for photos")
    parser.add_argument("-l", "--locations", help="Google location history JSON file")
    parser.add_argument(
        "-s",
        "--settings",
        default=str(BASE_DIR / "settings.json"),
        help="Settings JSON (default: %(default)s)",
    )
    parser.add_argument(
        "--sort", choices=[s.value for s in SortBy], default=SortBy.YEAR.value, help="Cluster order"
    )
    parser.add_argument("--no-lookup", action="store_true", help="Do not resolve place names")
    parser.add_argument("--log-dir", help="Directory for log files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    return parser.parse_args(argv)


def _load_config(path: str) -> PipelineConfig:
    settings_path = Path(path)
    if not settings_path.exists():
        logger.warning("Settings file {} not found, using defaults", settings_path)
        return PipelineConfig()
    return PipelineConfig.from_settings(JsonSettings(settings_path))


def _print_rows(title: str, rows: list[ClusterVM]) -> None:
    print(f"== {title} ==")
    if not rows:
        print("  (no photos)")
    for row in rows:
        dates = f"{row.start_text} .. {row.end_text}" if row.start_text else ""
        header = " | ".join(part for part in (row.label, row.country, dates) if part)
        print(f"{header} ({len(row.items)} photos)")
        for item in row.items:
            print(f"    {item.record.file_path}")
    print()


def _print_result(title: str, result: ClusterResult, order: SortBy) -> None:
    ordered = ClusterSortService().sort(result.clusters, order)
    _print_rows(title, build_rows(result, ordered))


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    init_logging(args.log_dir, console_level="DEBUG" if args.verbose else "WARNING")

    try:
        config = _load_config(args.settings)
    except (ValueError, OSError) as ex:
        logger.error("Invalid settings: {}", ex)
        return 1

    vm = LibraryVM(
        reader=ExifMetadataReader(),
        walker=FileScanner(),
        parser=GoogleLocationHistoryParser(),
        place_lookup=None if args.no_lookup else ReverseGeocodeLookup(),
        config=config,
    )

    try:
        vm.scan_folder(args.folder)
        if args.locations:
            vm.import_location_history(args.locations)
        spatial, temporal = vm.run_all()
    except (ScanError, LocationHistoryError, ClusteringParameterError) as ex:
        logger.error("{}", ex)
        return 1

    order = SortBy(args.sort)
    _print_result("Places", spatial, order)
    _print_result("Events", temporal, order)

    log_file = find_latest_log_file(args.log_dir)
    if log_file is not None:
        logger.debug("Log written to {}", log_file)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
