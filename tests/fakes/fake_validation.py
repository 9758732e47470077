# tests/fakes/fake_validation.py

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Sequence, Tuple

from spec.types import PlannedTask, Severity, Violation
from validation.registry import ValidatorBase, ValidatorRegistry


class RecordingValidator(ValidatorBase):
    """
    Validator double.

    - records (area, relative_path, bytes-or-None) for every call
    - flags resources whose file name is listed in `failing`
    """

    def __init__(
        self,
        validator_id: str = "recording",
        severity: Severity = Severity.ERROR,
        failing: Optional[Dict[str, Severity]] = None,
    ) -> None:
        super().__init__(validator_id, severity)
        self.failing = dict(failing or {})
        self.calls: List[Tuple[str, PurePosixPath, Optional[bytes]]] = []
        self.done_calls = 0

    def _handle(self, area: str, stream, relative_path: PurePosixPath) -> Optional[List[Violation]]:
        content = stream.read() if stream is not None else None
        self.calls.append((area, relative_path, content))
        severity = self.failing.get(relative_path.name)
        if severity is None:
            return None
        return [self.violation(f"'{relative_path.name}' is not allowed", relative_path, severity=severity)]

    def validate_metadata(self, stream, relative_path, root):
        return self._handle("metadata", stream, relative_path)

    def validate_content(self, stream, relative_path, root):
        return self._handle("content", stream, relative_path)

    def done(self):
        self.done_calls += 1
        return None

    def paths(self, area: Optional[str] = None) -> List[str]:
        return [str(path) for a, path, _ in self.calls if area is None or a == area]


class FakePlanSource:
    """ExecutionPlanSource returning a fixed plan or raising a fixed error."""

    def __init__(self, plan: Sequence[PlannedTask] = (), error: Optional[Exception] = None) -> None:
        self.plan = list(plan)
        self.error = error
        self.requested: List[List[str]] = []

    def compute_execution_plan(self, goals: Sequence[str]) -> List[PlannedTask]:
        self.requested.append(list(goals))
        if self.error is not None:
            raise self.error
        return list(self.plan)


class FakeBuildContext:
    """BuildContext recording marker operations."""

    def __init__(self, incremental: bool = False) -> None:
        self._incremental = incremental
        self.removed: List[str] = []
        self.added: List[Tuple[str, Violation]] = []

    @property
    def is_incremental(self) -> bool:
        return self._incremental

    def remove_messages(self, resource_key: str) -> None:
        self.removed.append(resource_key)

    def add_message(self, resource_key: str, violation: Violation) -> None:
        self.added.append((resource_key, violation))


def registry_with(*validators: ValidatorBase) -> ValidatorRegistry:
    """Registry whose factories hand out the given validator instances."""
    registry = ValidatorRegistry()
    for validator in validators:
        registry.register(validator.validator_id, lambda context, settings, v=validator: v)
    return registry


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create files (relative path -> text) below root."""
    for relative, text in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root
