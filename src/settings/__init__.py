# src/settings/__init__.py

"""
Settings for a validation run.

Defaults come from config/validate_files.yaml; a project may override them
with a vault-validate.yaml in its base directory.
"""

from .schema import PackageSettings, ValidateFilesSettings, ValidatorSettings
from .loader import load_settings

__all__ = [
    "PackageSettings",
    "ValidateFilesSettings",
    "ValidatorSettings",
    "load_settings",
]
