from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Callable, Dict, List, Optional

from layout.context import ValidationContext
from settings.schema import ValidatorSettings
from spec.types import Severity, Violation
from spec.validation import Validator

ValidatorFactory = Callable[[ValidationContext, ValidatorSettings], Optional[Validator]]


class ValidatorBase:
    """
    Base class for validator implementations.

    Subclasses override whichever hooks they need; the defaults have nothing
    to report. self.severity is the configured default severity, falling back
    to the one given at registration.
    """

    def __init__(self, validator_id: str, severity: Severity) -> None:
        self._validator_id = validator_id
        self.severity = severity

    @property
    def validator_id(self) -> str:
        return self._validator_id

    def violation(
        self,
        message: str,
        path: Optional[PurePosixPath] = None,
        severity: Optional[Severity] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> Violation:
        """Build a Violation attributed to this validator."""
        return Violation(
            severity=severity or self.severity,
            validator_id=self._validator_id,
            message=message,
            path=path,
            line=line,
            column=column,
        )

    def validate_metadata(
        self,
        stream: Optional[BinaryIO],
        relative_path: PurePosixPath,
        root: Path,
    ) -> Optional[List[Violation]]:
        return None

    def validate_content(
        self,
        stream: Optional[BinaryIO],
        relative_path: PurePosixPath,
        root: Path,
    ) -> Optional[List[Violation]]:
        return None

    def done(self) -> Optional[List[Violation]]:
        return None


@dataclass(frozen=True)
class ValidatorRegistration:
    """
    A registered validator factory.

    - package_only: the validator needs a complete package (e.g. checks that
      span several files) and is left out of file-level validation
    - default_severity: used when the settings do not override it
    """
    validator_id: str
    factory: ValidatorFactory
    package_only: bool = False
    default_severity: Severity = Severity.ERROR

    def create(self, context: ValidationContext, settings: ValidatorSettings) -> Optional[Validator]:
        return self.factory(context, settings)


class ValidatorRegistry:
    """Registry of validator factories, keyed by validator id."""

    def __init__(self) -> None:
        self._registrations: Dict[str, ValidatorRegistration] = {}

    def register(
        self,
        validator_id: str,
        factory: ValidatorFactory,
        package_only: bool = False,
        default_severity: Severity = Severity.ERROR,
    ) -> None:
        if validator_id in self._registrations:
            raise ValueError(f"Validator '{validator_id}' is already registered")
        self._registrations[validator_id] = ValidatorRegistration(
            validator_id=validator_id,
            factory=factory,
            package_only=package_only,
            default_severity=default_severity,
        )

    def list_validators(self) -> List[str]:
        return sorted(self._registrations)

    def get(self, validator_id: str) -> ValidatorRegistration:
        """Fetch a registration by id; raises KeyError if unknown."""
        if validator_id not in self._registrations:
            raise KeyError(f"Unknown validator: {validator_id}")
        return self._registrations[validator_id]

    def registrations(self) -> List[ValidatorRegistration]:
        return [self._registrations[name] for name in self.list_validators()]


# ---------------------------------------------------------------------------
# Global registry
# ---------------------------------------------------------------------------

_GLOBAL_REGISTRY: Optional[ValidatorRegistry] = None


def get_global_validator_registry() -> ValidatorRegistry:
    """
    Return the process-wide registry, creating it (with the built-in
    validators) on first use.
    """
    global _GLOBAL_REGISTRY
    if _GLOBAL_REGISTRY is None:
        from .builtin import register_builtin_validators

        registry = ValidatorRegistry()
        register_builtin_validators(registry)
        _GLOBAL_REGISTRY = registry
    return _GLOBAL_REGISTRY


def register_validator(
    validator_id: str,
    package_only: bool = False,
    default_severity: Severity = Severity.ERROR,
) -> Callable[[type], type]:
    """
    Class decorator registering a ValidatorBase subclass in the global registry.

        @register_validator("my-check")
        class MyCheck(ValidatorBase):
            ...

    The class is instantiated as cls(validator_id, severity).
    """

    def decorator(cls: type) -> type:
        def factory(context: ValidationContext, settings: ValidatorSettings) -> Validator:
            return cls(validator_id, settings.default_severity or default_severity)

        get_global_validator_registry().register(
            validator_id,
            factory,
            package_only=package_only,
            default_severity=default_severity,
        )
        return cls

    return decorator


def _reset_registry_for_tests() -> None:
    """Drop the global registry; the next access rebuilds it."""
    global _GLOBAL_REGISTRY
    _GLOBAL_REGISTRY = None
