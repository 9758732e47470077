# src/incremental/context.py

"""
Build contexts: where per-resource violation markers live between runs.

- NonIncrementalBuildContext: a full build; markers are not kept.
- MarkerFileBuildContext: an incremental build; markers are kept in a JSON
  file so the next run can clear the stale ones for a resource before it
  is validated again.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List

from spec.types import Severity, Violation

log = logging.getLogger(__name__)

MARKER_FILE_NAME = ".vault-validate-markers.json"


class NonIncrementalBuildContext:
    """Pass-through context for full builds."""

    @property
    def is_incremental(self) -> bool:
        return False

    def remove_messages(self, resource_key: str) -> None:
        return None

    def add_message(self, resource_key: str, violation: Violation) -> None:
        return None


def _violation_to_dict(violation: Violation) -> Dict[str, Any]:
    return {
        "severity": violation.severity.name,
        "validator_id": violation.validator_id,
        "message": violation.message,
        "path": None if violation.path is None else str(violation.path),
        "line": violation.line,
        "column": violation.column,
    }


def _violation_from_dict(data: Dict[str, Any]) -> Violation:
    return Violation(
        severity=Severity[data["severity"]],
        validator_id=data["validator_id"],
        message=data["message"],
        path=None if data.get("path") is None else PurePosixPath(data["path"]),
        line=data.get("line"),
        column=data.get("column"),
    )


class MarkerFileBuildContext:
    """
    Incremental context persisting markers as JSON.

    File layout:

        {
          "src/main/jcr_root/a.xml": [ {severity, validator_id, message, ...}, ... ],
          ...
        }

    Call save() once the run is over.
    """

    def __init__(self, marker_file: Path) -> None:
        self._path = Path(marker_file)
        self._markers: Dict[str, List[Violation]] = self._load()

    @property
    def is_incremental(self) -> bool:
        return True

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> Dict[str, List[Violation]]:
        if not self._path.exists():
            return {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
            return {key: [_violation_from_dict(v) for v in values] for key, values in raw.items()}
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as exc:
            log.warning("Ignoring unreadable marker file %s: %s", self._path, exc)
            return {}

    def markers(self, resource_key: str) -> List[Violation]:
        return list(self._markers.get(resource_key, []))

    def remove_messages(self, resource_key: str) -> None:
        self._markers.pop(resource_key, None)

    def add_message(self, resource_key: str, violation: Violation) -> None:
        self._markers.setdefault(resource_key, []).append(violation)

    def save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {key: [_violation_to_dict(v) for v in values] for key, values in self._markers.items() if values}
        self._path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
