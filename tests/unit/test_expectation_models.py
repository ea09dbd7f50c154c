"""Unit tests for the expectation run models."""

from __future__ import annotations

from schema_matchers.checker.models import (
    ExpectationModel,
    ExpectationResult,
    ExpectationRunResult,
    ExpectationSeverity,
    ExpectationStatus,
    RunStatus,
)
from schema_matchers.contract.contract import Contract


def _result(
    status: ExpectationStatus,
    severity: ExpectationSeverity = ExpectationSeverity.CRITICAL,
    name: str = "user.email",
) -> ExpectationResult:
    return ExpectationResult(name=name, severity=severity, status=status)


class TestEnums:
    """Tests for status and severity values."""

    def test_severity_values(self) -> None:
        assert {s.value for s in ExpectationSeverity} == {"critical", "warn"}

    def test_status_values(self) -> None:
        assert {s.value for s in ExpectationStatus} == {"pass", "fail", "error"}

    def test_run_status_values(self) -> None:
        assert {s.value for s in RunStatus} == {"passed", "warn", "failed", "error"}


class TestExpectationModel:
    """Tests for building matchers from expectations."""

    def test_build_matcher(self, required_string_contract: type[Contract]) -> None:
        model = ExpectationModel(
            name="a",
            contract_name="c",
            contract=required_string_contract,
            attribute="a",
            filled="string",
            value_rules=[("max_size", 5)],
            macro_use={"unique": True},
        )
        matcher = model.build_matcher()
        assert matcher.description() == (
            "validate for required `a` "
            "(filled with string; macro usage `{'unique': True}`) exists"
        )

    def test_minimal_matcher(self, optional_string_contract: type[Contract]) -> None:
        model = ExpectationModel(
            name="a",
            contract_name="c",
            contract=optional_string_contract,
            attribute="a",
            acceptance="optional",
        )
        assert model.build_matcher().matches(optional_string_contract)


class TestExpectationRunResult:
    """Tests for counters, status and summary."""

    def test_add_result_counters(self) -> None:
        run = ExpectationRunResult()
        run.add_result(_result(ExpectationStatus.PASS))
        run.add_result(_result(ExpectationStatus.FAIL))
        run.add_result(_result(ExpectationStatus.ERROR))
        assert (run.passed, run.failed, run.errored) == (1, 1, 1)

    def test_all_pass(self) -> None:
        run = ExpectationRunResult()
        run.add_result(_result(ExpectationStatus.PASS))
        run.compute_status()
        assert run.status == RunStatus.PASSED

    def test_warn_failure(self) -> None:
        run = ExpectationRunResult()
        run.add_result(_result(ExpectationStatus.PASS))
        run.add_result(_result(ExpectationStatus.FAIL, ExpectationSeverity.WARN))
        run.compute_status()
        assert run.status == RunStatus.WARN

    def test_critical_error_fails(self) -> None:
        run = ExpectationRunResult()
        run.add_result(_result(ExpectationStatus.ERROR))
        run.add_result(_result(ExpectationStatus.FAIL, ExpectationSeverity.WARN))
        run.compute_status()
        assert run.status == RunStatus.FAILED

    def test_summary(self) -> None:
        run = ExpectationRunResult(run_id="run-1", total_expectations=2)
        run.add_result(_result(ExpectationStatus.PASS, name="user.name"))
        failed = _result(ExpectationStatus.FAIL)
        failed.message = "be missing validation for required `email`"
        run.add_result(failed)
        run.compute_status()
        text = run.summary()
        assert "Expectation Run: run-1" in text
        assert "Status: FAILED" in text
        assert "PASS [critical] user.name" in text
        assert "FAIL [critical] user.email (be missing validation for required `email`)" in text

    def test_summary_error_message(self) -> None:
        run = ExpectationRunResult(status=RunStatus.ERROR, error_message="Manifest not found")
        assert "Run Error: Manifest not found" in run.summary()
