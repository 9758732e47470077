# src/validation/skip.py

"""
Decide whether file-level validation is redundant for this build invocation.

validate-files is only worth running when no later validate-package task of
this tool will re-check everything, or when the build is incremental (an
IDE build re-validating single resources never reaches validate-package).
"""

from __future__ import annotations

import logging
from typing import Sequence

from lifecycle.errors import PlanResolutionError
from spec.validation import ExecutionPlanSource

log = logging.getLogger(__name__)

TOOL_COMPONENT_ID = "filevault-package"
FULL_VALIDATION_TASK = "validate-package"


def is_task_planned(
    plan_source: ExecutionPlanSource,
    planned_goals: Sequence[str],
    component_id: str = TOOL_COMPONENT_ID,
    task_name: str = FULL_VALIDATION_TASK,
) -> bool:
    """
    Return True if the expanded plan contains (component_id, task_name).

    Raises PlanResolutionError if the plan cannot be computed.
    """
    if not planned_goals:
        return False
    for task in plan_source.compute_execution_plan(list(planned_goals)):
        if task.component_id == component_id and task.task_name == task_name:
            return True
    return False


def should_skip(
    is_incremental: bool,
    planned_goals: Sequence[str],
    plan_source: ExecutionPlanSource,
) -> bool:
    """
    Return True if a later full validation makes this run redundant.

    - incremental builds never skip
    - no planned goals never skips
    - a plan that cannot be computed is treated as "no later full validation"
    """
    if is_incremental:
        return False
    if not planned_goals:
        return False

    log.debug("Following goals are detected: %s", ", ".join(planned_goals))
    try:
        return is_task_planned(plan_source, planned_goals)
    except PlanResolutionError as exc:
        # TODO: surface this more prominently; a broken plan means validation runs twice
        log.warning("Could not determine planned task executions: %s", exc)
        return False
