# src/lifecycle/__init__.py

"""
Expansion of requested build goals into an ordered execution plan.
"""

from .errors import (
    ComponentNotFoundError,
    LifecycleDefinitionError,
    PhaseNotFoundError,
    PlanResolutionError,
    TaskNotFoundError,
)
from .plan import LifecycleDefinition, LifecyclePlanSource, load_lifecycle

__all__ = [
    "ComponentNotFoundError",
    "LifecycleDefinitionError",
    "PhaseNotFoundError",
    "PlanResolutionError",
    "TaskNotFoundError",
    "LifecycleDefinition",
    "LifecyclePlanSource",
    "load_lifecycle",
]
