# src/validation/runner.py

"""
Orchestration of a file-level validation run.

Order of work:
  1. honour the 'skip' setting
  2. SkipDecision: defer to a later validate-package task if one is planned
  3. resolve the working area layout and the validation context
  4. build the validator chain (package-only validators left out); an empty
     chain is a configuration error
  5. scan + dispatch the metadata root, the generated metadata root and the
     content root, in that order
  6. collect the chain's final violations, print the report, finalize

The run is single-threaded; every resource is validated exactly once.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console

from layout.context import build_validation_context
from layout.resolver import WorkingAreaLayout, resolve_layout
from lifecycle.plan import LifecyclePlanSource
from scanning.scanner import ContentScanner
from settings.schema import ValidateFilesSettings
from spec.types import ResourceArea, RunOutcome
from spec.validation import BuildContext, ExecutionPlanSource, ValidatorChain

from .dispatcher import ValidationDispatcher
from .errors import ConfigurationError, ValidationFailure
from .executor import create_validation_executor
from .registry import ValidatorRegistry
from .report import print_report, print_used_validators
from .reporter import ViolationReporter
from .skip import FULL_VALIDATION_TASK, should_skip

log = logging.getLogger(__name__)


class ValidateFilesRunner:
    """
    Runs validate-files for one project.

    Collaborators can be injected for tests; defaults are the lifecycle
    plan source, the global validator registry and a plain rich Console.
    """

    def __init__(
        self,
        settings: ValidateFilesSettings,
        build_context: BuildContext,
        plan_source: Optional[ExecutionPlanSource] = None,
        registry: Optional[ValidatorRegistry] = None,
        scanner: Optional[ContentScanner] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.settings = settings
        self.build_context = build_context
        self.plan_source = plan_source or LifecyclePlanSource()
        self.registry = registry
        self.scanner = scanner or ContentScanner()
        self.console = console or Console()
        self.reporter = ViolationReporter(settings.basedir, build_context)

    def run(self) -> RunOutcome:
        settings = self.settings

        if settings.skip:
            log.info("Skipping validation as 'skip' is set")
            return self.reporter.finalize(settings.fail_on_validation_warnings, skipped=True)

        if should_skip(self.build_context.is_incremental, settings.goals, self.plan_source):
            log.info(
                "Skip this run as this is not an incremental build and '%s' is executed later on!",
                FULL_VALIDATION_TASK,
            )
            outcome = self.reporter.finalize(settings.fail_on_validation_warnings, skipped=True)
            print_report([], outcome, self.console)
            return outcome

        layout = resolve_layout(settings)
        context = build_validation_context(layout, settings.package)

        chain = create_validation_executor(
            context,
            settings.validators,
            registry=self.registry,
            include_package_only=False,
        )
        if chain is None:
            raise ConfigurationError("No registered validators found!")
        print_used_validators(chain.validator_ids(), context, self.console)

        self._validate_layout(chain, layout)
        self.reporter.clear_prior(None)
        self.reporter.record(None, chain.done())

        outcome = self.reporter.finalize(settings.fail_on_validation_warnings)
        print_report(self.reporter.items(), outcome, self.console)
        return outcome

    def _validate_layout(self, chain: ValidatorChain, layout: WorkingAreaLayout) -> None:
        dispatcher = ValidationDispatcher(chain, self.reporter)
        if layout.metadata_root is not None:
            self._validate_root(dispatcher, layout.metadata_root, ResourceArea.METADATA)
        self._validate_root(dispatcher, layout.generated_metadata_root, ResourceArea.METADATA)
        if layout.content_root is not None:
            self._validate_root(dispatcher, layout.content_root, ResourceArea.CONTENT)

    def _validate_root(self, dispatcher: ValidationDispatcher, root: Path, area: ResourceArea) -> None:
        for entry in self.scanner.scan(root, self.settings.excludes, area):
            dispatcher.dispatch(root, entry)


def fail_build_in_case_of_violations(outcome: RunOutcome, fail_on_warnings: bool) -> None:
    """Raise ValidationFailure listing every contributing violation if the outcome failed."""
    if outcome.failed:
        raise ValidationFailure(outcome.contributing(fail_on_warnings), fail_on_warnings)


def run_validation(
    settings: ValidateFilesSettings,
    build_context: BuildContext,
    plan_source: Optional[ExecutionPlanSource] = None,
    registry: Optional[ValidatorRegistry] = None,
    console: Optional[Console] = None,
) -> RunOutcome:
    """Run validation and raise ValidationFailure when the threshold is crossed."""
    runner = ValidateFilesRunner(
        settings,
        build_context,
        plan_source=plan_source,
        registry=registry,
        console=console,
    )
    outcome = runner.run()
    fail_build_in_case_of_violations(outcome, settings.fail_on_validation_warnings)
    return outcome
