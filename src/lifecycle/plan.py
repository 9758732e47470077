# src/lifecycle/plan.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from spec.types import PlannedTask

from .errors import (
    ComponentNotFoundError,
    LifecycleDefinitionError,
    PhaseNotFoundError,
    TaskNotFoundError,
)

log = logging.getLogger(__name__)

# Default lifecycle definition:
# vault-validate/config/lifecycle.yaml
DEFAULT_LIFECYCLE_FILE = Path(__file__).resolve().parents[2] / "config" / "lifecycle.yaml"


@dataclass(frozen=True)
class ComponentPrefix:
    """A short name usable in "prefix:task" goals."""
    component_id: str
    tasks: Tuple[str, ...]


@dataclass
class LifecycleDefinition:
    """
    Ordered phases plus the tasks bound to each of them.

    - phases:   ordered phase names
    - bindings: phase -> tasks executed in that phase (in order)
    - prefixes: prefix -> component and the tasks it provides
    """
    phases: List[str]
    bindings: Dict[str, List[PlannedTask]] = field(default_factory=dict)
    prefixes: Dict[str, ComponentPrefix] = field(default_factory=dict)

    def tasks_up_to(self, phase: str) -> List[PlannedTask]:
        index = self.phases.index(phase)
        tasks: List[PlannedTask] = []
        for name in self.phases[: index + 1]:
            tasks.extend(self.bindings.get(name, []))
        return tasks


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise LifecycleDefinitionError(f"Missing lifecycle definition: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise LifecycleDefinitionError(f"Could not parse lifecycle definition {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise LifecycleDefinitionError(f"Expected mapping at top of {path}, got {type(data).__name__}")
    return data


def parse_lifecycle(raw: Dict[str, Any]) -> LifecycleDefinition:
    """Parse the raw YAML mapping; malformed input raises LifecycleDefinitionError."""
    phases = raw.get("phases") or []
    if not isinstance(phases, list) or not phases:
        raise LifecycleDefinitionError("Lifecycle must define a non-empty 'phases' list.")
    phases = [str(p) for p in phases]

    bindings: Dict[str, List[PlannedTask]] = {}
    for phase, tasks in (raw.get("bindings") or {}).items():
        if phase not in phases:
            raise LifecycleDefinitionError(f"Binding refers to unknown phase '{phase}'.")
        bound: List[PlannedTask] = []
        for task in tasks or []:
            try:
                bound.append(PlannedTask(component_id=str(task["component"]), task_name=str(task["task"])))
            except (KeyError, TypeError) as exc:
                raise LifecycleDefinitionError(
                    f"Binding in phase '{phase}' must have 'component' and 'task': {task!r}"
                ) from exc
        bindings[phase] = bound

    prefixes: Dict[str, ComponentPrefix] = {}
    for prefix, cfg in (raw.get("prefixes") or {}).items():
        if not isinstance(cfg, dict) or "component" not in cfg:
            raise LifecycleDefinitionError(f"Prefix '{prefix}' must define a 'component'.")
        prefixes[str(prefix)] = ComponentPrefix(
            component_id=str(cfg["component"]),
            tasks=tuple(str(t) for t in cfg.get("tasks") or []),
        )

    return LifecycleDefinition(phases=phases, bindings=bindings, prefixes=prefixes)


def load_lifecycle(path: Optional[Path] = None) -> LifecycleDefinition:
    return parse_lifecycle(_load_yaml(path or DEFAULT_LIFECYCLE_FILE))


class LifecyclePlanSource:
    """
    ExecutionPlanSource backed by a LifecycleDefinition.

    Goals are either phase names ("install" runs everything up to install)
    or "prefix:task" pairs naming a single task directly.
    """

    def __init__(self, lifecycle: Optional[LifecycleDefinition] = None, path: Optional[Path] = None) -> None:
        self._lifecycle = lifecycle
        self._path = path

    @property
    def lifecycle(self) -> LifecycleDefinition:
        # Loaded lazily so a broken definition only matters when a plan is needed
        if self._lifecycle is None:
            self._lifecycle = load_lifecycle(self._path)
        return self._lifecycle

    def compute_execution_plan(self, goals: Sequence[str]) -> List[PlannedTask]:
        plan: List[PlannedTask] = []
        for goal in goals:
            plan.extend(self._expand(goal))
        log.debug("Execution plan for %s: %s", list(goals), plan)
        return plan

    def _expand(self, goal: str) -> List[PlannedTask]:
        lifecycle = self.lifecycle
        if ":" in goal:
            prefix, task = goal.split(":", 1)
            component = lifecycle.prefixes.get(prefix)
            if component is None:
                raise ComponentNotFoundError(f"No component found for prefix '{prefix}' in goal '{goal}'.")
            if task not in component.tasks:
                raise TaskNotFoundError(
                    f"Component '{component.component_id}' does not provide task '{task}'."
                )
            return [PlannedTask(component_id=component.component_id, task_name=task)]

        if goal not in lifecycle.phases:
            raise PhaseNotFoundError(
                f"Unknown lifecycle phase '{goal}'. Specify a valid phase or a goal in the format <prefix>:<task>."
            )
        return lifecycle.tasks_up_to(goal)
