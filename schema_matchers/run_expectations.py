"""Run schema expectations from a YAML manifest.

Parses the manifest, probes every contract with the configured matchers,
and reports pass/fail/error per expectation.

Usage:
    schema-matchers [OPTIONS]

Examples:
    schema-matchers --manifest expectations.yaml
    schema-matchers --manifest expectations.yaml \\
        --db-path data/expectations.duckdb --config matcher.yaml
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from schema_matchers.checker.models import RunStatus
from schema_matchers.checker.runner import DEFAULT_MANIFEST_PATH, run_expectations
from schema_matchers.lib.config_loader import load_settings
from schema_matchers.lib.logging_config import setup_logging


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for the expectation runner.

    Args:
        argv: Argument list; defaults to ``sys.argv[1:]``.

    Returns:
        Exit code: 0 for success or warn-only, 1 for failure or error.
    """
    parser = argparse.ArgumentParser(
        description="Check that validation contracts enforce declared expectations.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  schema-matchers --manifest expectations.yaml\n"
            "  schema-matchers --db-path data/expectations.duckdb --verbose\n"
        ),
    )
    parser.add_argument(
        "--manifest",
        type=str,
        default=DEFAULT_MANIFEST_PATH,
        help=f"Path to the YAML expectation manifest (default: {DEFAULT_MANIFEST_PATH})",
    )
    parser.add_argument(
        "--db-path",
        type=str,
        default=None,
        help="DuckDB file to record run results in (default: no recording)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file with matcher settings",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug-level logging",
    )

    args = parser.parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "INFO")

    try:
        settings = load_settings(Path(args.config) if args.config else None)
    except (FileNotFoundError, ValueError) as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return 1

    result = run_expectations(
        manifest_path=args.manifest,
        db_path=args.db_path,
        settings=settings,
    )

    print(result.summary())

    if result.status in (RunStatus.FAILED, RunStatus.ERROR):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
