from __future__ import annotations

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from order_ingest.config.loader import ConfigError, ImportConfig, load_config
from order_ingest.excel.headers import build_candidates, resolve_columns
from order_ingest.excel.layout import classify_layout
from order_ingest.excel.reader import WorkbookReadError, read_workbook
from order_ingest.logging.init import log_summary, set_debug, setup_logging
from order_ingest.services.orchestrator import ProcessingError, process_all, scan_source_files
from order_ingest.services.summary import render_summary_line
from order_ingest.storage.store import JsonBlobStore

"""CLI entrypoint: import order spreadsheets into the dashboard store.

Flow:
- Load .env (overrides the environment) and the YAML config
- Scan the source directory for .xlsx/.xlsm/.xls/.csv files (non-recursive)
- Ingest, merge and persist (see services.orchestrator)
- Print the SUMMARY line and exit with 0 / 2 (some file failed) / 1 (fatal)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1

DEFAULT_CONFIG_PATH = Path("config/import.yml")


def _load_env_file(path: Path, override: bool = True) -> None:
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="order-ingest", description="Import order spreadsheets into the order store")
    p.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH, help="YAML config path")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print column maps, layouts & first rows then exit")
    p.add_argument("--dry-run", action="store_true", help="Parse and merge without writing the store")
    p.add_argument("--register-malls", action="store_true", help="Add unknown mall names to the registry")
    return p.parse_args(argv)


def _inspect_data(cfg: ImportConfig) -> int:
    try:
        files = scan_source_files(Path(cfg.source_directory))
    except ProcessingError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    if not files:
        print("inspect: no spreadsheet files")
        return EXIT_SUCCESS_ALL
    candidates = build_candidates(cfg.header_aliases)
    for f in files:
        print(f"FILE: {f.name}")
        try:
            sheets = read_workbook(f, cfg.sheet_name)
        except WorkbookReadError as e:
            print(f"  read_error: {e}")
            continue
        for sname, grid in sheets.items():
            if not grid:
                print(f"  SHEET: {sname} (empty)")
                continue
            column_map = resolve_columns(grid[0], candidates)
            layout = classify_layout(grid, column_map)
            print(f"  SHEET: {sname} rows={len(grid) - 1} layout={layout.value} columns={column_map}")
            print("    sample_rows=", [
                [v.isoformat() if hasattr(v, "isoformat") else v for v in row] for row in grid[1:4]
            ])
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] が渡された場合に sys.argv (pytest の引数) を読まないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"), override=True)

    if args.debug:
        set_debug(True)
        logger.debug("debug mode enabled")

    try:
        cfg = load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect_data:
        return _inspect_data(cfg)

    directory = Path(cfg.source_directory)
    if not directory.exists():
        logger.error(f"directory not found: {directory}")
        return EXIT_FATAL

    logger.info(f"Importing files from: {directory} -> {cfg.store_path}")
    store = JsonBlobStore(Path(cfg.store_path))
    try:
        result = process_all(
            cfg,
            store,
            dry_run=args.dry_run,
            register_malls=args.register_malls,
        )
    except ProcessingError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if result.unknown_malls:
        logger.warning(f"unregistered malls in this run: {', '.join(result.unknown_malls)}")

    # log_summary が "SUMMARY " を付けるため先頭を除去
    log_summary(render_summary_line(result)[len("SUMMARY "):])

    if result.failed_files > 0:
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
