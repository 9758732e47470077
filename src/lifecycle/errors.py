# src/lifecycle/errors.py

"""
Errors raised while expanding requested goals into an execution plan.

All of them derive from PlanResolutionError so callers that only need to
know "the plan could not be determined" can catch a single type.
"""

from __future__ import annotations


class PlanResolutionError(Exception):
    """Base class: the execution plan could not be computed."""


class PhaseNotFoundError(PlanResolutionError):
    """A goal names neither a known phase nor a prefix:task pair."""


class ComponentNotFoundError(PlanResolutionError):
    """No component is registered for the prefix used in a prefix:task goal."""


class TaskNotFoundError(PlanResolutionError):
    """The component exists but does not provide the requested task."""


class LifecycleDefinitionError(PlanResolutionError):
    """The lifecycle definition itself is missing or malformed."""
