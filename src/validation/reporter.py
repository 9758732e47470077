# src/validation/reporter.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from spec.types import RunOutcome, Severity, Violation, highest_severity
from spec.validation import BuildContext

log = logging.getLogger(__name__)

# Key used for violations that are not bound to a single resource
# (e.g. the ones returned by ValidatorChain.done()).
PACKAGE_KEY = ""

_LOG_LEVELS = {
    Severity.ERROR: logging.ERROR,
    Severity.WARNING: logging.WARNING,
    Severity.INFO: logging.INFO,
}


def resource_key(resource: Optional[Path], basedir: Path) -> str:
    """
    Normalize a resource path into the key used for bookkeeping.

    Paths below basedir become basedir-relative, everything else stays
    absolute; separators are always "/".
    """
    if resource is None:
        return PACKAGE_KEY
    resource = Path(resource)
    try:
        return resource.relative_to(basedir).as_posix()
    except ValueError:
        return resource.as_posix()


class ViolationReporter:
    """
    Owns every violation of a single run.

    The accumulator is a mapping keyed by normalized resource path; its only
    mutators are clear_prior() and record(). Insertion order is dispatch
    order. Not thread-safe: a run is single-threaded.
    """

    def __init__(self, basedir: Path, build_context: BuildContext) -> None:
        self._basedir = Path(basedir)
        self._build_context = build_context
        self._by_resource: Dict[str, List[Violation]] = {}

    def clear_prior(self, resource: Optional[Path]) -> None:
        """
        Forget everything recorded for resource, in this run and in previous
        incremental runs. Call right before validating it again.
        """
        key = resource_key(resource, self._basedir)
        self._by_resource.pop(key, None)
        self._build_context.remove_messages(key)

    def record(self, resource: Optional[Path], violations: Iterable[Violation]) -> None:
        key = resource_key(resource, self._basedir)
        for violation in violations:
            self._by_resource.setdefault(key, []).append(violation)
            self._build_context.add_message(key, violation)
            log.log(
                _LOG_LEVELS[violation.severity],
                "ValidationViolation: %s%s",
                f"{key}: " if key else "",
                violation.describe(),
            )

    def items(self) -> List[Tuple[str, List[Violation]]]:
        """(resource key, violations) pairs in dispatch order."""
        return [(key, list(values)) for key, values in self._by_resource.items() if values]

    def violations(self) -> List[Violation]:
        return [v for values in self._by_resource.values() for v in values]

    def finalize(self, fail_on_warnings: bool, skipped: bool = False) -> RunOutcome:
        violations = tuple(self.violations())
        if skipped and not violations:
            return RunOutcome.skipped_run()

        highest = highest_severity(violations)
        failed = highest is Severity.ERROR or (fail_on_warnings and highest is Severity.WARNING)
        return RunOutcome(
            total_violations=len(violations),
            highest_severity=highest,
            skipped=skipped,
            failed=failed,
            violations=violations,
        )
