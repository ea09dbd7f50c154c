"""Expectation runner: parses a manifest, probes contracts, records results.

Each expectation becomes a :class:`ValidateMatcher` run against its
contract. When a DuckDB path is given, run metadata is stored in the
``expectation_runs`` and ``expectation_results`` tables.
"""

from __future__ import annotations

import logging
import time
import uuid
from datetime import UTC, datetime
from pathlib import Path

import duckdb

from schema_matchers.checker.models import (
    ExpectationModel,
    ExpectationResult,
    ExpectationRunResult,
    ExpectationStatus,
    RunStatus,
)
from schema_matchers.checker.parser import parse_manifest
from schema_matchers.lib.config_loader import MatcherSettings

logger = logging.getLogger(__name__)

DEFAULT_MANIFEST_PATH: str = "expectations.yaml"

# DDL for the expectation_runs metadata table
_EXPECTATION_RUNS_DDL: str = """
CREATE TABLE IF NOT EXISTS expectation_runs (
    run_id               VARCHAR PRIMARY KEY,
    manifest_path        VARCHAR NOT NULL,
    started_at           TIMESTAMPTZ NOT NULL,
    completed_at         TIMESTAMPTZ,
    status               VARCHAR NOT NULL,
    total_expectations   INTEGER NOT NULL DEFAULT 0,
    passed               INTEGER NOT NULL DEFAULT 0,
    failed               INTEGER NOT NULL DEFAULT 0,
    errored              INTEGER NOT NULL DEFAULT 0,
    elapsed_seconds      DOUBLE NOT NULL DEFAULT 0.0,
    error_message        VARCHAR
);
"""

# DDL for the expectation_results metadata table
_EXPECTATION_RESULTS_DDL: str = """
CREATE TABLE IF NOT EXISTS expectation_results (
    id                VARCHAR PRIMARY KEY,
    run_id            VARCHAR NOT NULL,
    expectation_name  VARCHAR NOT NULL,
    contract_name     VARCHAR NOT NULL,
    attribute         VARCHAR NOT NULL,
    severity          VARCHAR NOT NULL,
    status            VARCHAR NOT NULL,
    message           VARCHAR,
    elapsed_seconds   DOUBLE NOT NULL,
    error_message     VARCHAR
);
"""


def create_metadata_tables(conn: duckdb.DuckDBPyConnection) -> None:
    """Create the expectation_runs and expectation_results tables if absent.

    Args:
        conn: An open DuckDB connection.
    """
    conn.execute(_EXPECTATION_RUNS_DDL)
    conn.execute(_EXPECTATION_RESULTS_DDL)
    logger.debug("expectation_runs and expectation_results tables ready")


def create_run(
    conn: duckdb.DuckDBPyConnection,
    *,
    run_id: str,
    manifest_path: str,
    started_at: str,
) -> None:
    """Insert a new expectation_runs record at the start of a run.

    Args:
        conn: An open DuckDB connection.
        run_id: Unique run identifier.
        manifest_path: Manifest being run.
        started_at: ISO-format timestamp of when the run began.
    """
    conn.execute(
        """
        INSERT INTO expectation_runs (run_id, manifest_path, started_at, status)
        VALUES (?, ?, ?::TIMESTAMPTZ, 'running')
        """,
        [run_id, manifest_path, started_at],
    )
    logger.info("Created expectation run %s", run_id)


def complete_run(
    conn: duckdb.DuckDBPyConnection,
    *,
    run_result: ExpectationRunResult,
) -> None:
    """Update an expectation_runs record upon run completion.

    Args:
        conn: An open DuckDB connection.
        run_result: The completed run result with final counters.
    """
    conn.execute(
        """
        UPDATE expectation_runs
        SET completed_at        = ?::TIMESTAMPTZ,
            status              = ?,
            total_expectations  = ?,
            passed              = ?,
            failed              = ?,
            errored             = ?,
            elapsed_seconds     = ?,
            error_message       = ?
        WHERE run_id = ?
        """,
        [
            datetime.now(UTC).isoformat(),
            run_result.status.value,
            run_result.total_expectations,
            run_result.passed,
            run_result.failed,
            run_result.errored,
            run_result.elapsed_seconds,
            run_result.error_message,
            run_result.run_id,
        ],
    )
    logger.info(
        "Completed expectation run %s with status=%s",
        run_result.run_id,
        run_result.status.value,
    )


def record_result(
    conn: duckdb.DuckDBPyConnection,
    *,
    run_id: str,
    expectation: ExpectationModel,
    result: ExpectationResult,
) -> None:
    """Insert an expectation_results row.

    Args:
        conn: An open DuckDB connection.
        run_id: The parent run identifier.
        expectation: The parsed expectation (carries contract and attribute).
        result: The per-expectation result.
    """
    conn.execute(
        """
        INSERT INTO expectation_results (
            id, run_id, expectation_name, contract_name, attribute,
            severity, status, message, elapsed_seconds, error_message
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            str(uuid.uuid4()),
            run_id,
            result.name,
            expectation.contract_name,
            expectation.attribute,
            result.severity.value,
            result.status.value,
            result.message,
            result.elapsed_seconds,
            result.error,
        ],
    )


def execute_expectation(
    expectation: ExpectationModel,
    settings: MatcherSettings | None = None,
) -> ExpectationResult:
    """Run a single expectation and return its result.

    Exceptions raised by the contract while probing produce an ERROR status
    with the exception text captured.

    Args:
        expectation: The parsed expectation.
        settings: Matcher settings.

    Returns:
        An ExpectationResult with status, message and timing.
    """
    matcher = expectation.build_matcher(settings)
    start = time.monotonic()
    try:
        matched = matcher.matches(expectation.contract)
    except Exception as exc:  # contract code is user code
        elapsed = time.monotonic() - start
        error_msg = f"{type(exc).__name__}: {exc}"
        logger.error(
            "Expectation '%s' ERROR: %s (%.2fs)", expectation.name, error_msg, elapsed
        )
        return ExpectationResult(
            name=expectation.name,
            severity=expectation.severity,
            status=ExpectationStatus.ERROR,
            message=matcher.description(),
            elapsed_seconds=elapsed,
            error=error_msg,
        )

    elapsed = time.monotonic() - start
    if matched:
        logger.info("Expectation '%s' passed in %.2fs", expectation.name, elapsed)
        return ExpectationResult(
            name=expectation.name,
            severity=expectation.severity,
            status=ExpectationStatus.PASS,
            message=matcher.description(),
            elapsed_seconds=elapsed,
        )

    logger.warning(
        "Expectation '%s' FAILED: %s", expectation.name, matcher.failure_message()
    )
    return ExpectationResult(
        name=expectation.name,
        severity=expectation.severity,
        status=ExpectationStatus.FAIL,
        message=matcher.failure_message(),
        elapsed_seconds=elapsed,
    )


def run_expectations(
    *,
    manifest_path: str | Path = DEFAULT_MANIFEST_PATH,
    db_path: str | Path | None = None,
    settings: MatcherSettings | None = None,
) -> ExpectationRunResult:
    """Run every expectation in a manifest.

    This is the main entry point for the runner. It:
    1. Parses the manifest and loads its contracts
    2. Runs a matcher per expectation
    3. Computes the overall run status
    4. Optionally records the run in DuckDB

    Args:
        manifest_path: Path to the YAML manifest.
        db_path: DuckDB file for run metadata, or None to skip persistence.
        settings: Matcher settings.

    Returns:
        ExpectationRunResult with execution details.
    """
    manifest_path = Path(manifest_path)
    start_time = time.monotonic()
    started_at = datetime.now(UTC).isoformat()
    result = ExpectationRunResult()

    try:
        expectations = parse_manifest(manifest_path)
    except (FileNotFoundError, ValueError) as exc:
        result.status = RunStatus.ERROR
        result.error_message = str(exc)
        result.elapsed_seconds = time.monotonic() - start_time
        logger.error(result.error_message)
        expectations = []

    result.total_expectations = len(expectations)

    if result.status != RunStatus.ERROR:
        if not expectations:
            logger.warning("No expectations found in %s", manifest_path)
        for expectation in expectations:
            result.add_result(execute_expectation(expectation, settings))
        result.compute_status()
        result.elapsed_seconds = time.monotonic() - start_time

    if db_path is not None:
        _persist_run(
            Path(db_path),
            manifest_path=str(manifest_path),
            started_at=started_at,
            expectations=expectations,
            result=result,
        )

    logger.info(result.summary())
    return result


def _persist_run(
    db_path: Path,
    *,
    manifest_path: str,
    started_at: str,
    expectations: list[ExpectationModel],
    result: ExpectationRunResult,
) -> None:
    """Write a finished run and its results to DuckDB."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = duckdb.connect(str(db_path))
    try:
        create_metadata_tables(conn)
        create_run(
            conn,
            run_id=result.run_id,
            manifest_path=manifest_path,
            started_at=started_at,
        )
        for expectation, expectation_result in zip(
            expectations, result.results, strict=True
        ):
            record_result(
                conn,
                run_id=result.run_id,
                expectation=expectation,
                result=expectation_result,
            )
        complete_run(conn, run_result=result)
    finally:
        conn.close()
