# src/validation/__init__.py

"""
Validation orchestration for vault-validate.

This package collects:
- the validator registry and the executor composing registered validators
- the dispatcher routing scanned resources to metadata/content validation
- the reporter owning all violations of a run
- the skip decision and the runner wiring everything together

Only the error types are re-exported here; import the submodules directly
for everything else to keep import order free of cycles.
"""

from .errors import ConfigurationError, ValidateFilesError, ValidationFailure

__all__ = ["ConfigurationError", "ValidateFilesError", "ValidationFailure"]
