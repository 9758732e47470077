from __future__ import annotations

import dataclasses
import logging
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Callable, Dict, List, Mapping, Optional

from layout.context import ValidationContext
from settings.schema import ValidatorSettings
from spec.types import Severity, Violation
from spec.validation import Validator

from .registry import ValidatorRegistry, get_global_validator_registry

log = logging.getLogger(__name__)

EXECUTOR_ID = "validation-executor"


class ValidationExecutor:
    """
    ValidatorChain running every configured validator in turn.

    - The stream is rewound before each validator so all of them see the
      whole resource.
    - Violations without a path get the path of the resource being validated.
    - A validator raising anything but OSError produces an error-severity
      violation instead of aborting the chain; OSError propagates so the
      caller can report the unreadable resource.
    """

    def __init__(self, validators: Mapping[str, Validator]) -> None:
        self._validators: Dict[str, Validator] = dict(validators)

    def validator_ids(self) -> List[str]:
        return list(self._validators)

    def validate_metadata(
        self,
        stream: Optional[BinaryIO],
        relative_path: PurePosixPath,
        root: Path,
    ) -> List[Violation]:
        return self._run(lambda v: v.validate_metadata(stream, relative_path, root), stream, relative_path)

    def validate_content(
        self,
        stream: Optional[BinaryIO],
        relative_path: PurePosixPath,
        root: Path,
    ) -> List[Violation]:
        return self._run(lambda v: v.validate_content(stream, relative_path, root), stream, relative_path)

    def done(self) -> List[Violation]:
        return self._run(lambda v: v.done(), None, None)

    def _run(
        self,
        call: Callable[[Validator], Optional[List[Violation]]],
        stream: Optional[BinaryIO],
        relative_path: Optional[PurePosixPath],
    ) -> List[Violation]:
        violations: List[Violation] = []
        for validator_id, validator in self._validators.items():
            if stream is not None:
                stream.seek(0)
            try:
                result = call(validator) or []
            except OSError:
                raise
            except Exception as exc:
                log.debug("Validator %s raised", validator_id, exc_info=True)
                result = [
                    Violation(
                        severity=Severity.ERROR,
                        validator_id=EXECUTOR_ID,
                        message=f"Exception in validator '{validator_id}': {exc!r}",
                        path=relative_path,
                    )
                ]
            for violation in result:
                if violation.path is None and relative_path is not None:
                    violation = dataclasses.replace(violation, path=relative_path)
                violations.append(violation)
        return violations


def create_validation_executor(
    context: ValidationContext,
    settings_by_id: Mapping[str, ValidatorSettings],
    registry: Optional[ValidatorRegistry] = None,
    include_package_only: bool = False,
) -> Optional[ValidationExecutor]:
    """
    Instantiate all enabled validators.

    Returns None when no validator is left, so the caller can fail fast
    instead of reporting an empty (and meaningless) result.
    """
    if registry is None:
        registry = get_global_validator_registry()

    for validator_id in settings_by_id:
        try:
            registry.get(validator_id)
        except KeyError:
            log.warning("Found settings for validator '%s' which is not registered", validator_id)

    validators: Dict[str, Validator] = {}
    for registration in registry.registrations():
        validator_id = registration.validator_id
        settings = settings_by_id.get(validator_id, ValidatorSettings())
        if settings.is_disabled:
            log.debug("Skipping validator '%s' as it is disabled", validator_id)
            continue
        if registration.package_only and not include_package_only:
            log.debug("Skipping validator '%s' as it only works on complete packages", validator_id)
            continue
        if settings.default_severity is None:
            settings = dataclasses.replace(settings, default_severity=registration.default_severity)
        validator = registration.create(context, settings)
        if validator is None:
            log.debug("Validator '%s' is not applicable in this context", validator_id)
            continue
        validators[validator_id] = validator

    if not validators:
        return None
    return ValidationExecutor(validators)
