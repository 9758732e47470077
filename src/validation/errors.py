# src/validation/errors.py

"""
Domain errors for vault-validate.

Violations found by validators are NOT errors; they are data collected by
the ViolationReporter. Only two situations end a run with an exception:

- ConfigurationError: the run cannot be set up (no validators registered,
  malformed exclude patterns, unreadable settings). Exit code 2.
- ValidationFailure: the run completed and the violations crossed the
  configured threshold. Exit code 1.
"""

from __future__ import annotations

from typing import Sequence

from spec.types import Violation


class ValidateFilesError(RuntimeError):
    """Base class for all errors raised by the orchestrator."""


class ConfigurationError(ValidateFilesError):
    """The build configuration is unusable; abort before scanning."""


class ValidationFailure(ValidateFilesError):
    """
    Raised when a finished run's violations cross the fail threshold.

    The message enumerates every contributing violation.
    """

    def __init__(self, violations: Sequence[Violation], fail_on_warnings: bool) -> None:
        self.violations = tuple(violations)
        self.fail_on_warnings = fail_on_warnings
        lines = [v.describe() for v in self.violations]
        kind = "errors or warnings" if fail_on_warnings else "errors"
        header = f"Found {len(self.violations)} violation(s) with {kind}. Check above violations for details."
        super().__init__("\n".join([header] + [f"  {line}" for line in lines]))
