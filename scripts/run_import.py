"""
Demo script: import one RDB1 document via the public API and export it.

Usage:
    uv run python scripts/run_import.py tests/data/uv_discharge.rdb
    uv run python scripts/run_import.py "https://waterservices.usgs.gov/nwis/iv/?sites=02177000&parameterCd=00060&format=rdb" --tz America/New_York
    uv run python scripts/run_import.py --config outputs/uv.yaml
    uv run python scripts/run_import.py tests/data/qw_samples.rdb --raw --format csv

With --config, the YAML run file supplies the source, options and output
settings; other flags are ignored.
"""

from __future__ import annotations

import argparse
import logging
import sys

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%H:%M:%S",
)
log = logging.getLogger("run_import")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Import an NWIS RDB1 document.")
    parser.add_argument("source", nargs="?", help="Local RDB file or service URL")
    parser.add_argument("--config", help="YAML run file (overrides other flags)")
    parser.add_argument("--tz", default="UTC", help="Output timezone (IANA name)")
    parser.add_argument("--raw", action="store_true", help="Keep every column as text")
    parser.add_argument(
        "--no-datetime", action="store_true", help="Skip date/time reconstruction"
    )
    parser.add_argument("--output-dir", default="outputs/", help="Export directory")
    parser.add_argument("--table-name", default="data", help="Exported file stem")
    parser.add_argument("--format", choices=["csv", "parquet"], default="parquet")
    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    import nwis_rdb_ingest
    from nwis_rdb_ingest.config import (
        ImportConfig,
        ImportOptions,
        OutputConfig,
        load_config,
    )

    args = _build_parser().parse_args(argv)

    if args.config:
        config = load_config(args.config)
    elif args.source:
        config = ImportConfig(
            source=args.source,
            options=ImportOptions(
                as_datetime=not args.no_datetime,
                convert_type=not args.raw,
                tz=args.tz,
            ),
            output=OutputConfig(
                output_dir=args.output_dir,
                output_format=args.format,
                table_name=args.table_name,
            ),
        )
    else:
        log.error("Either a source or --config is required")
        return 2

    log.info("Importing: %s", config.source)
    record_set = nwis_rdb_ingest.import_rdb1(
        config.source,
        as_datetime=config.options.as_datetime,
        convert_type=config.options.convert_type,
        tz=config.options.tz,
    )

    for diagnostic in record_set.diagnostics:
        log.info("  diagnostic: %s %s", diagnostic.kind.value, diagnostic.message)
    if record_set.is_empty:
        log.warning("No rows imported from %s", config.source)

    written = nwis_rdb_ingest.export_record_set(
        record_set,
        output_dir=config.output.output_dir,
        table_name=config.output.table_name,
        output_format=config.output.output_format,
    )
    for path in written:
        log.info("  wrote %s", path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
