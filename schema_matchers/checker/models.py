"""Domain models for manifest-driven expectation runs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from schema_matchers.contract.contract import Contract
from schema_matchers.lib.config_loader import MatcherSettings
from schema_matchers.matcher.validate import ValidateMatcher


class ExpectationSeverity(Enum):
    """Severity level of an expectation.

    Determines how a failure impacts the overall run status.
    """

    CRITICAL = "critical"
    WARN = "warn"


class ExpectationStatus(Enum):
    """Outcome of running a single expectation.

    - PASS: the matcher matched.
    - FAIL: the matcher did not match.
    - ERROR: the contract raised while being probed.
    """

    PASS = "pass"
    FAIL = "fail"
    ERROR = "error"


class RunStatus(Enum):
    """Overall status of an expectation run.

    - PASSED: all expectations passed.
    - WARN: at least one warn-severity expectation failed or errored.
    - FAILED: at least one critical expectation failed.
    - ERROR: runner-level error (e.g., missing manifest).
    """

    PASSED = "passed"
    WARN = "warn"
    FAILED = "failed"
    ERROR = "error"


@dataclass
class ExpectationModel:
    """One parsed manifest expectation.

    Attributes:
        name: Expectation name from the manifest or ``<contract>.<attribute>``.
        contract_name: Key of the contract in the manifest.
        contract: Contract class the expectation is checked against.
        attribute: Attribute under test.
        acceptance: ``required`` or ``optional``.
        filled: Declared type, or None to skip the filled check.
        value_rules: ``(name, argument)`` value rules.
        macro_use: Expected macro descriptor, or None.
        severity: Critical or warn.
        description: Human-readable note.
    """

    name: str
    contract_name: str
    contract: type[Contract]
    attribute: str
    acceptance: str = "required"
    filled: str | None = None
    value_rules: list[tuple[Any, Any]] = field(default_factory=list)
    macro_use: Any = None
    severity: ExpectationSeverity = ExpectationSeverity.CRITICAL
    description: str = ""

    def build_matcher(self, settings: MatcherSettings | None = None) -> ValidateMatcher:
        """Create the configured matcher for this expectation."""
        matcher = ValidateMatcher(self.attribute, self.acceptance, settings=settings)
        if self.filled is not None:
            matcher.filled(self.filled)
        if self.value_rules:
            matcher.value(self.value_rules)
        if self.macro_use is not None:
            matcher.macro_use(self.macro_use)
        return matcher


@dataclass
class ExpectationResult:
    """Result of running a single expectation.

    Attributes:
        name: Expectation name.
        severity: Critical or warn.
        status: Pass, fail, or error.
        message: Matcher description (pass) or failure message (fail).
        elapsed_seconds: Execution time in seconds.
        error: Exception text if status is ERROR.
    """

    name: str
    severity: ExpectationSeverity
    status: ExpectationStatus
    message: str = ""
    elapsed_seconds: float = 0.0
    error: str | None = None


@dataclass
class ExpectationRunResult:
    """Aggregate result for one runner invocation.

    Attributes:
        run_id: Unique identifier for this run.
        status: Overall run status.
        total_expectations: Number of expectations parsed.
        passed: Number that passed.
        failed: Number that failed.
        errored: Number that errored.
        elapsed_seconds: Total wall-clock time.
        results: Per-expectation details.
        error_message: Top-level error if the run couldn't complete.
    """

    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: RunStatus = RunStatus.PASSED
    total_expectations: int = 0
    passed: int = 0
    failed: int = 0
    errored: int = 0
    elapsed_seconds: float = 0.0
    results: list[ExpectationResult] = field(default_factory=list)
    error_message: str | None = None

    def add_result(self, result: ExpectationResult) -> None:
        """Add an expectation result and update counters.

        Args:
            result: The expectation result to add.
        """
        self.results.append(result)
        if result.status == ExpectationStatus.PASS:
            self.passed += 1
        elif result.status == ExpectationStatus.FAIL:
            self.failed += 1
        elif result.status == ExpectationStatus.ERROR:
            self.errored += 1

    def compute_status(self) -> None:
        """Compute overall run status from individual results.

        - Any critical failure or error => FAILED
        - Only warn failures or errors => WARN
        - All pass => PASSED
        """
        has_critical = any(
            r.status != ExpectationStatus.PASS
            and r.severity == ExpectationSeverity.CRITICAL
            for r in self.results
        )
        has_warn = any(
            r.status != ExpectationStatus.PASS
            and r.severity == ExpectationSeverity.WARN
            for r in self.results
        )

        if has_critical:
            self.status = RunStatus.FAILED
        elif has_warn:
            self.status = RunStatus.WARN
        else:
            self.status = RunStatus.PASSED

    def summary(self) -> str:
        """Generate a human-readable summary of the run.

        Returns:
            Multi-line string with run status and per-expectation details.
        """
        lines = [
            f"Expectation Run: {self.run_id}",
            f"Status: {self.status.value.upper()}",
            f"Total: {self.total_expectations} | "
            f"Passed: {self.passed} | "
            f"Failed: {self.failed} | "
            f"Errored: {self.errored}",
            f"Elapsed: {self.elapsed_seconds:.2f}s",
            "",
        ]

        for r in self.results:
            icon = (
                "PASS" if r.status == ExpectationStatus.PASS
                else "FAIL" if r.status == ExpectationStatus.FAIL
                else "ERROR"
            )
            line = f"  {icon} [{r.severity.value}] {r.name}"
            if r.status == ExpectationStatus.FAIL:
                line += f" ({r.message})"
            if r.status == ExpectationStatus.ERROR and r.error:
                line += f" -- {r.error}"
            lines.append(line)

        if self.error_message:
            lines.append(f"\nRun Error: {self.error_message}")

        return "\n".join(lines)
