"""Unit tests for the concurrent check evaluation engine."""

import asyncio
import time
from pathlib import Path

from complyscan.config import AuditConfig
from complyscan.core.pipeline import evaluate
from complyscan.models import (
    CheckDefinition,
    DetectorOutcome,
    OwaspCategory,
    Severity,
    Status,
    Taxonomy,
)
from complyscan.utils import ScanData

_SCAN = ScanData(root=Path("."))


def _passes(scan, config) -> DetectorOutcome:
    return DetectorOutcome.passed("all good")


def _fails(scan, config) -> DetectorOutcome:
    return DetectorOutcome.failed(["bad"], ["fix it"])


def _raises(scan, config) -> DetectorOutcome:
    raise ValueError("boom")


def _sleeps(scan, config) -> DetectorOutcome:
    time.sleep(0.3)
    return DetectorOutcome.passed()


def _returns_none(scan, config):
    return None


def _definition(check_id: str, detector) -> CheckDefinition:
    return CheckDefinition(
        id=check_id,
        category=OwaspCategory.A01_BROKEN_ACCESS_CONTROL,
        name=check_id,
        description="engine test",
        severity=Severity.HIGH,
        detector=detector,
    )


def _evaluate(definitions, deadline_in: float = 10.0, **config_kwargs):
    config = AuditConfig(**config_kwargs).validate(Taxonomy.OWASP)
    deadline = time.monotonic() + deadline_in
    return asyncio.run(evaluate(definitions, _SCAN, config, deadline))


class TestEvaluate:
    """Tests for evaluation outcomes."""

    def test_results_keep_definition_order(self) -> None:
        definitions = [
            _definition("A01-003", _fails),
            _definition("A01-001", _passes),
            _definition("A01-002", _raises),
        ]
        results = _evaluate(definitions)

        assert [r.id for r in results] == ["A01-003", "A01-001", "A01-002"]
        assert [r.status for r in results] == [Status.FAIL, Status.PASS, Status.FAIL]

    def test_outcome_is_copied_into_result(self) -> None:
        result = _evaluate([_definition("A01-001", _fails)])[0]

        assert result.findings == ("bad",)
        assert result.recommendations == ("fix it",)
        assert result.severity is Severity.HIGH

    def test_exception_becomes_failure(self) -> None:
        result = _evaluate([_definition("A01-001", _raises)])[0]

        assert result.status is Status.FAIL
        assert result.findings == ("Check could not be completed: boom",)

    def test_timeout_becomes_failure(self) -> None:
        result = _evaluate([_definition("A01-001", _sleeps)], check_timeout=0.05)[0]

        assert result.status is Status.FAIL
        assert result.findings[0].startswith("Check exceeded time budget")

    def test_unexpected_return_becomes_failure(self) -> None:
        result = _evaluate([_definition("A01-001", _returns_none)])[0]

        assert result.status is Status.FAIL
        assert "unexpected detector result" in result.findings[0]

    def test_exhausted_budget_fails_every_check(self) -> None:
        definitions = [_definition("A01-001", _passes), _definition("A01-002", _passes)]
        results = _evaluate(definitions, deadline_in=-1.0)

        assert all(r.status is Status.FAIL for r in results)
        assert all("budget exhausted" in r.findings[0] for r in results)

    def test_concurrency_of_one(self) -> None:
        definitions = [_definition(f"A01-00{i}", _passes) for i in range(1, 6)]
        results = _evaluate(definitions, concurrency=1)

        assert len(results) == 5
        assert all(r.status is Status.PASS for r in results)

    def test_slow_check_does_not_block_others(self) -> None:
        """Other checks finish even while one is timing out."""
        definitions = [
            _definition("A01-001", _sleeps),
            _definition("A01-002", _passes),
        ]
        results = _evaluate(definitions, check_timeout=0.05)

        assert results[0].status is Status.FAIL
        assert results[1].status is Status.PASS

    def test_no_definitions(self) -> None:
        assert _evaluate([]) == []
