# src/spec/__init__.py

from __future__ import annotations

"""
Public spec surface for vault-validate.

This module re-exports *interfaces and data types* shared across the codebase:
  - value types (Violation, Severity, ScanEntry, RunOutcome, PlannedTask)
  - collaborator protocols (Validator, ValidatorChain, BuildContext,
    ExecutionPlanSource)

Deliberately does NOT export concrete implementations; wiring lives in
src/validation/.
"""

from .types import (
    EntryKind,
    PlannedTask,
    ResourceArea,
    RunOutcome,
    ScanEntry,
    Severity,
    Violation,
    highest_severity,
)

from .validation import (
    BuildContext,
    ExecutionPlanSource,
    Validator,
    ValidatorChain,
)

__all__ = [
    # value types
    "EntryKind",
    "PlannedTask",
    "ResourceArea",
    "RunOutcome",
    "ScanEntry",
    "Severity",
    "Violation",
    "highest_severity",
    # collaborators
    "BuildContext",
    "ExecutionPlanSource",
    "Validator",
    "ValidatorChain",
]
