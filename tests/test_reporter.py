# tests/test_reporter.py

from __future__ import annotations

from pathlib import Path, PurePosixPath

from spec.types import RunOutcome, Severity, Violation
from validation.reporter import PACKAGE_KEY, ViolationReporter, resource_key

from tests.fakes.fake_validation import FakeBuildContext


def _violation(severity: Severity, name: str = "a.txt") -> Violation:
    return Violation(severity=severity, validator_id="test", message="boom", path=PurePosixPath(name))


def test_resource_key_is_basedir_relative_posix(tmp_path: Path) -> None:
    assert resource_key(tmp_path / "src" / "a.txt", tmp_path) == "src/a.txt"
    assert resource_key(Path("/elsewhere/a.txt"), tmp_path) == "/elsewhere/a.txt"
    assert resource_key(None, tmp_path) == PACKAGE_KEY


def test_clear_prior_then_record_is_idempotent(tmp_path: Path) -> None:
    reporter = ViolationReporter(tmp_path, FakeBuildContext())
    resource = tmp_path / "a.txt"

    reporter.clear_prior(resource)
    reporter.record(resource, [_violation(Severity.ERROR)])
    first = reporter.violations()

    reporter.clear_prior(resource)
    reporter.record(resource, [_violation(Severity.ERROR)])

    assert reporter.violations() == first
    assert len(reporter.violations()) == 1


def test_record_keeps_dispatch_order_and_forwards_markers(tmp_path: Path) -> None:
    context = FakeBuildContext(incremental=True)
    reporter = ViolationReporter(tmp_path, context)

    reporter.record(tmp_path / "b.txt", [_violation(Severity.WARNING, "b.txt")])
    reporter.record(tmp_path / "a.txt", [_violation(Severity.ERROR, "a.txt")])
    reporter.record(tmp_path / "c.txt", [])

    assert [key for key, _ in reporter.items()] == ["b.txt", "a.txt"]
    assert [key for key, _ in context.added] == ["b.txt", "a.txt"]

    reporter.clear_prior(tmp_path / "b.txt")
    assert context.removed == ["b.txt"]
    assert [key for key, _ in reporter.items()] == ["a.txt"]


def test_finalize_fails_on_errors_only_by_default(tmp_path: Path) -> None:
    reporter = ViolationReporter(tmp_path, FakeBuildContext())
    reporter.record(tmp_path / "a.txt", [_violation(Severity.WARNING), _violation(Severity.INFO)])

    outcome = reporter.finalize(fail_on_warnings=False)
    assert not outcome.failed
    assert outcome.total_violations == 2
    assert outcome.highest_severity is Severity.WARNING

    assert reporter.finalize(fail_on_warnings=True).failed

    reporter.record(tmp_path / "b.txt", [_violation(Severity.ERROR, "b.txt")])
    outcome = reporter.finalize(fail_on_warnings=False)
    assert outcome.failed
    assert outcome.highest_severity is Severity.ERROR
    assert [str(v.path) for v in outcome.contributing(False)] == ["b.txt"]


def test_skipped_outcome_is_distinct_from_clean_run(tmp_path: Path) -> None:
    reporter = ViolationReporter(tmp_path, FakeBuildContext())

    skipped = reporter.finalize(fail_on_warnings=True, skipped=True)
    clean = reporter.finalize(fail_on_warnings=True)

    assert skipped == RunOutcome.skipped_run()
    assert skipped.skipped and not skipped.failed
    assert not clean.skipped and not clean.failed
    assert clean.highest_severity is None
