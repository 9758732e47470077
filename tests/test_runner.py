# tests/test_runner.py

"""
End-to-end scenarios for validation.runner.

Each test builds a small project tree in tmp_path, runs validate-files with
a RecordingValidator and checks the outcome and the rendered report.
"""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest
from rich.console import Console

from incremental.context import MarkerFileBuildContext, NonIncrementalBuildContext
from lifecycle.errors import ComponentNotFoundError
from settings.loader import build_settings
from spec.types import PlannedTask, Severity
from validation.errors import ConfigurationError, ValidationFailure
from validation.registry import ValidatorRegistry
from validation.reporter import PACKAGE_KEY
from validation.runner import ValidateFilesRunner, run_validation
from validation.skip import FULL_VALIDATION_TASK, TOOL_COMPONENT_ID

from tests.fakes.fake_validation import FakePlanSource, RecordingValidator, registry_with, write_tree


def _settings(basedir: Path, **raw):
    values = {
        "meta_inf_vault_directory": ["${basedir}/META-INF/vault", "${basedir}/src/main/META-INF/vault"],
        "work_directory": "${build_directory}/vault-work",
        "jcr_root_source_directory": ["${basedir}/jcr_root", "${basedir}/src/main/jcr_root"],
        "excludes": ["**/.vlt"],
    }
    values.update(raw)
    return build_settings(basedir, values)


def _console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def project(tmp_path: Path) -> Path:
    return write_tree(
        tmp_path,
        {
            "src/main/META-INF/vault/filter.xml": "<workspaceFilter/>",
            "target/vault-work/META-INF/MANIFEST.MF": "Manifest-Version: 1.0\n",
            "target/vault-work/META-INF/vault/properties.xml": "<properties/>",
            "src/main/jcr_root/a.txt": "fine",
            "src/main/jcr_root/b.txt": "bad",
            "src/main/jcr_root/.vlt": "",
        },
    )


def test_error_violation_fails_the_run(project: Path) -> None:
    validator = RecordingValidator(failing={"b.txt": Severity.ERROR})
    console = _console()
    runner = ValidateFilesRunner(
        _settings(project),
        NonIncrementalBuildContext(),
        plan_source=FakePlanSource(),
        registry=registry_with(validator),
        console=console,
    )

    outcome = runner.run()

    assert outcome.failed
    assert not outcome.skipped
    assert outcome.total_violations == 1
    assert str(outcome.violations[0].path) == "b.txt"

    report = console.file.getvalue()
    assert "recording" in report
    assert "src/main/jcr_root/b.txt" in report
    assert "FAILED" in report


def test_roots_are_routed_to_their_areas_in_order(project: Path) -> None:
    validator = RecordingValidator()
    runner = ValidateFilesRunner(
        _settings(project),
        NonIncrementalBuildContext(),
        plan_source=FakePlanSource(),
        registry=registry_with(validator),
        console=_console(),
    )

    outcome = runner.run()

    assert not outcome.failed
    assert validator.paths("metadata") == [
        # metadata root (src/main/META-INF)
        "vault/filter.xml",
        "vault",
        # generated metadata root
        "MANIFEST.MF",
        "vault/properties.xml",
        "vault",
    ]
    assert validator.paths("content") == ["a.txt", "b.txt"]
    assert validator.done_calls == 1


def test_plan_resolution_error_does_not_skip(project: Path, caplog) -> None:
    validator = RecordingValidator(failing={"b.txt": Severity.ERROR})
    runner = ValidateFilesRunner(
        _settings(project, goals=["bogus:goal"]),
        NonIncrementalBuildContext(),
        plan_source=FakePlanSource(error=ComponentNotFoundError("bogus")),
        registry=registry_with(validator),
        console=_console(),
    )

    with caplog.at_level(logging.WARNING):
        outcome = runner.run()

    assert outcome.failed
    assert outcome.total_violations == 1
    assert [str(v.path) for v in outcome.violations] == ["b.txt"]
    plan_warnings = [r for r in caplog.records if r.name == "validation.skip"]
    assert len(plan_warnings) == 1


def test_skips_when_validate_package_follows(project: Path) -> None:
    validator = RecordingValidator(failing={"b.txt": Severity.ERROR})
    console = _console()
    runner = ValidateFilesRunner(
        _settings(project, goals=["install"]),
        NonIncrementalBuildContext(),
        plan_source=FakePlanSource(plan=[PlannedTask(TOOL_COMPONENT_ID, FULL_VALIDATION_TASK)]),
        registry=registry_with(validator),
        console=console,
    )

    outcome = runner.run()

    assert outcome.skipped
    assert not outcome.failed
    assert validator.calls == []
    assert "skipped" in console.file.getvalue()


def test_incremental_build_runs_even_if_validate_package_follows(project: Path) -> None:
    validator = RecordingValidator()
    runner = ValidateFilesRunner(
        _settings(project, goals=["install"]),
        MarkerFileBuildContext(project / "target" / "markers.json"),
        plan_source=FakePlanSource(plan=[PlannedTask(TOOL_COMPONENT_ID, FULL_VALIDATION_TASK)]),
        registry=registry_with(validator),
        console=_console(),
    )

    outcome = runner.run()

    assert not outcome.skipped
    assert validator.paths("content") == ["a.txt", "b.txt"]


def test_skip_setting(project: Path) -> None:
    validator = RecordingValidator()
    outcome = ValidateFilesRunner(
        _settings(project, skip=True),
        NonIncrementalBuildContext(),
        plan_source=FakePlanSource(),
        registry=registry_with(validator),
        console=_console(),
    ).run()

    assert outcome.skipped
    assert validator.calls == []


def test_no_validators_is_a_configuration_error(project: Path) -> None:
    runner = ValidateFilesRunner(
        _settings(project),
        NonIncrementalBuildContext(),
        plan_source=FakePlanSource(),
        registry=ValidatorRegistry(),
        console=_console(),
    )
    with pytest.raises(ConfigurationError, match="No registered validators"):
        runner.run()


def test_warnings_fail_only_when_configured(project: Path) -> None:
    def run(fail_on_warnings: bool):
        validator = RecordingValidator(failing={"b.txt": Severity.WARNING})
        return run_validation(
            _settings(project, fail_on_validation_warnings=fail_on_warnings),
            NonIncrementalBuildContext(),
            plan_source=FakePlanSource(),
            registry=registry_with(validator),
            console=_console(),
        )

    outcome = run(False)
    assert not outcome.failed
    assert outcome.highest_severity is Severity.WARNING

    with pytest.raises(ValidationFailure) as excinfo:
        run(True)
    assert len(excinfo.value.violations) == 1
    assert "b.txt" in str(excinfo.value)


def test_incremental_rerun_does_not_duplicate_violations(project: Path) -> None:
    marker_file = project / "target" / "markers.json"

    for _ in range(2):
        context = MarkerFileBuildContext(marker_file)
        outcome = ValidateFilesRunner(
            _settings(project),
            context,
            plan_source=FakePlanSource(),
            registry=registry_with(RecordingValidator(failing={"b.txt": Severity.ERROR})),
            console=_console(),
        ).run()
        context.save()
        assert outcome.total_violations == 1

    markers = MarkerFileBuildContext(marker_file)
    assert len(markers.markers("src/main/jcr_root/b.txt")) == 1


class _PackageWarningValidator(RecordingValidator):
    def done(self):
        super().done()
        return [self.violation("package is incomplete", severity=Severity.WARNING)]


def test_incremental_rerun_does_not_duplicate_package_violations(project: Path) -> None:
    marker_file = project / "target" / "markers.json"

    for _ in range(3):
        context = MarkerFileBuildContext(marker_file)
        outcome = ValidateFilesRunner(
            _settings(project),
            context,
            plan_source=FakePlanSource(),
            registry=registry_with(_PackageWarningValidator()),
            console=_console(),
        ).run()
        context.save()
        assert outcome.total_violations == 1

    assert len(MarkerFileBuildContext(marker_file).markers(PACKAGE_KEY)) == 1
