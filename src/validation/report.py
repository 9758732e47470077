# rich-based violation report
# src/validation/report.py

"""
Human-readable output of a validation run, rendered with rich.

- print_used_validators: which validators are active and for which package
- print_report:          one row per violation (resource, severity,
                         validator id, message) in scan order, followed by
                         a one-line verdict
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from rich.console import Console
from rich.table import Table
from rich.text import Text

from layout.context import ValidationContext
from spec.types import RunOutcome, Severity, Violation

_SEVERITY_STYLES = {
    Severity.ERROR: "bold red",
    Severity.WARNING: "yellow",
    Severity.INFO: "cyan",
}


def print_used_validators(
    validator_ids: Sequence[str],
    context: ValidationContext,
    console: Optional[Console] = None,
) -> None:
    console = console or Console()
    console.print(
        f"Using {len(validator_ids)} validators for package {context.package_id}: "
        + ", ".join(validator_ids)
    )


def build_report_table(items: Sequence[Tuple[str, List[Violation]]]) -> Table:
    table = Table(title="Validation violations", show_lines=False)
    table.add_column("Resource", overflow="fold")
    table.add_column("Severity")
    table.add_column("Validator")
    table.add_column("Message", overflow="fold")

    for resource, violations in items:
        for violation in violations:
            location = resource or "<package>"
            if violation.line is not None:
                location += f":{violation.line}"
                if violation.column is not None:
                    location += f":{violation.column}"
            table.add_row(
                location,
                Text(violation.severity.label, style=_SEVERITY_STYLES[violation.severity]),
                violation.validator_id,
                violation.message,
            )
    return table


def print_report(
    items: Sequence[Tuple[str, List[Violation]]],
    outcome: RunOutcome,
    console: Optional[Console] = None,
) -> None:
    console = console or Console()

    if outcome.skipped:
        console.print("Validation skipped: reporting is deferred to 'validate-package'.")
        return

    if items:
        console.print(build_report_table(items))

    errors = outcome.count(Severity.ERROR)
    warnings = outcome.count(Severity.WARNING)
    verdict = Text("FAILED", style="bold red") if outcome.failed else Text("PASSED", style="bold green")
    summary = Text("Validation ")
    summary.append(verdict)
    summary.append(f" ({errors} error(s), {warnings} warning(s), {outcome.total_violations} total)")
    console.print(summary)
