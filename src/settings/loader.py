from __future__ import annotations

import logging
from pathlib import Path
from string import Template
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from scanning.patterns import ExcludePatternSet
from spec.types import Severity
from validation.errors import ConfigurationError

from .schema import PackageSettings, ValidateFilesSettings, ValidatorSettings

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"
DEFAULTS_FILE = CONFIG_ROOT / "validate_files.yaml"

# Looked up in the base directory of the validated project when no explicit
# config file is given.
PROJECT_CONFIG_NAME = "vault-validate.yaml"


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML mapping, failing with ConfigurationError on anything else."""
    if not path.exists():
        raise ConfigurationError(f"Missing config file: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Could not parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected mapping at top of {path}, got {type(data).__name__}")
    return data


def _expand(value: Any, variables: Mapping[str, str], key: str) -> str:
    try:
        return Template(str(value)).substitute(variables)
    except (KeyError, ValueError) as exc:
        raise ConfigurationError(f"Invalid placeholder in '{key}': {value!r}") from exc


def _as_path(value: Any, variables: Mapping[str, str], basedir: Path, key: str) -> Path:
    path = Path(_expand(value, variables, key))
    if not path.is_absolute():
        path = basedir / path
    return path


def _as_list(value: Any, key: str) -> List[str]:
    """Accept a YAML list or a comma separated string."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(part) for part in value]
    raise ConfigurationError(f"'{key}' must be a list or a comma separated string, got {type(value).__name__}")


def _as_bool(value: Any, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "false"):
        return value.strip().lower() == "true"
    raise ConfigurationError(f"'{key}' must be a boolean, got {value!r}")


def _parse_validators(raw: Any) -> Dict[str, ValidatorSettings]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("'validators' must be a mapping of validator id to settings.")

    result: Dict[str, ValidatorSettings] = {}
    for validator_id, cfg in raw.items():
        cfg = cfg or {}
        if not isinstance(cfg, dict):
            raise ConfigurationError(f"Settings for validator '{validator_id}' must be a mapping.")
        severity = cfg.get("default_severity")
        try:
            parsed_severity = Severity.parse(severity) if severity is not None else None
        except ValueError as exc:
            raise ConfigurationError(f"Validator '{validator_id}': {exc}") from exc
        result[str(validator_id)] = ValidatorSettings(
            default_severity=parsed_severity,
            is_disabled=_as_bool(cfg.get("disabled", False), f"validators.{validator_id}.disabled"),
            options=dict(cfg.get("options") or {}),
        )
    return result


def _parse_package(raw: Any) -> PackageSettings:
    raw = raw or {}
    if not isinstance(raw, dict):
        raise ConfigurationError("'package' must be a mapping with group/name/version.")
    return PackageSettings(
        group=raw.get("group"),
        name=raw.get("name"),
        version=None if raw.get("version") is None else str(raw.get("version")),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_raw_settings(basedir: Path, config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Merge the packaged defaults with the project's own config file.

    Project values replace defaults key by key (no deep merge, lists are
    replaced as a whole).
    """
    raw = _load_yaml(DEFAULTS_FILE)

    if config_path is None:
        candidate = basedir / PROJECT_CONFIG_NAME
        if candidate.exists():
            config_path = candidate
    if config_path is not None:
        log.info("Loading settings from %s", config_path)
        raw.update(_load_yaml(Path(config_path)))
    return raw


def build_settings(basedir: Path, raw: Mapping[str, Any]) -> ValidateFilesSettings:
    """Turn a raw mapping into ValidateFilesSettings, expanding placeholders."""
    basedir = Path(basedir).resolve()

    variables: Dict[str, str] = {"basedir": str(basedir)}
    variables["build_directory"] = str(
        _as_path(raw.get("build_directory", "${basedir}/target"), variables, basedir, "build_directory")
    )
    variables["output_directory"] = str(
        _as_path(raw.get("output_directory", "${build_directory}/classes"), variables, basedir, "output_directory")
    )

    meta_inf: Tuple[Path, ...] = tuple(
        _as_path(v, variables, basedir, "meta_inf_vault_directory")
        for v in _as_list(raw.get("meta_inf_vault_directory"), "meta_inf_vault_directory")
    )
    jcr_root: Tuple[Path, ...] = tuple(
        _as_path(v, variables, basedir, "jcr_root_source_directory")
        for v in _as_list(raw.get("jcr_root_source_directory"), "jcr_root_source_directory")
    )
    if not meta_inf:
        raise ConfigurationError("'meta_inf_vault_directory' must name at least one directory.")
    if not jcr_root:
        raise ConfigurationError("'jcr_root_source_directory' must name at least one directory.")

    work_directory = raw.get("work_directory")
    if not work_directory:
        raise ConfigurationError("'work_directory' is required.")

    built = raw.get("built_content_directory")
    classifier = raw.get("classifier") or ""

    return ValidateFilesSettings(
        basedir=basedir,
        meta_inf_vault_directory=meta_inf,
        work_directory=_as_path(work_directory, variables, basedir, "work_directory"),
        jcr_root_source_directory=jcr_root,
        excludes=ExcludePatternSet.with_default_excludes(_as_list(raw.get("excludes"), "excludes")),
        classifier=str(classifier).strip(),
        built_content_directory=_as_path(built, variables, basedir, "built_content_directory") if built else None,
        fail_on_validation_warnings=_as_bool(
            raw.get("fail_on_validation_warnings", False), "fail_on_validation_warnings"
        ),
        skip=_as_bool(raw.get("skip", False), "skip"),
        goals=tuple(_as_list(raw.get("goals"), "goals")),
        validators=_parse_validators(raw.get("validators")),
        package=_parse_package(raw.get("package")),
    )


def load_settings(
    basedir: Path,
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ValidateFilesSettings:
    """
    Main entry point: defaults + project config + command line overrides.

    Overrides with a value of None are ignored so argparse namespaces can be
    passed through without filtering.
    """
    raw = load_raw_settings(Path(basedir), config_path)
    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value
    return build_settings(Path(basedir), raw)
