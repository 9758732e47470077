# ValidateFilesSettings, ValidatorSettings, PackageSettings dataclasses
# src/settings/schema.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from scanning.patterns import ExcludePatternSet
from spec.types import Severity


@dataclass(frozen=True)
class ValidatorSettings:
    """Per-validator knobs, keyed by validator id in ValidateFilesSettings.validators."""
    default_severity: Optional[Severity] = None
    is_disabled: bool = False
    options: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PackageSettings:
    """Fallback package identity when no properties.xml is available."""
    group: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None


@dataclass(frozen=True)
class ValidateFilesSettings:
    """
    Fully resolved settings for one validation run.

    Candidate lists are ordered search paths; the first existing directory wins.
    excludes already contains the default excludes.
    """
    basedir: Path
    meta_inf_vault_directory: Tuple[Path, ...]
    work_directory: Path
    jcr_root_source_directory: Tuple[Path, ...]
    excludes: ExcludePatternSet
    classifier: str = ""
    built_content_directory: Optional[Path] = None
    fail_on_validation_warnings: bool = False
    skip: bool = False
    goals: Tuple[str, ...] = ()
    validators: Dict[str, ValidatorSettings] = field(default_factory=dict)
    package: PackageSettings = field(default_factory=PackageSettings)
