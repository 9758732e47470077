# src/validation/builtin.py

"""
Validators shipped with vault-validate.

- xml-wellformedness: every *.xml resource must parse (both areas)
- content-filename:   content-area names must map to repository node names
- filter-definition:  vault/filter.xml must exist (needs a complete package,
                      so it is skipped by file-level validation)
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import PurePosixPath
from typing import BinaryIO, List, Optional

from layout.context import ValidationContext
from settings.schema import ValidatorSettings
from spec.types import Severity, Violation

from .registry import ValidatorBase, ValidatorRegistry

FILTER_XML = PurePosixPath("vault/filter.xml")

# Characters that cannot appear in a repository node name
INVALID_NAME_CHARACTERS = "[]*|"


class XmlWellformednessValidator(ValidatorBase):

    def _check(self, stream: Optional[BinaryIO], relative_path: PurePosixPath) -> Optional[List[Violation]]:
        if stream is None or relative_path.suffix.lower() != ".xml":
            return None
        try:
            ET.parse(stream)
        except ET.ParseError as exc:
            line, column = exc.position
            return [self.violation(f"Invalid XML: {exc}", relative_path, line=line, column=column + 1)]
        return None

    def validate_metadata(self, stream, relative_path, root):
        return self._check(stream, relative_path)

    def validate_content(self, stream, relative_path, root):
        return self._check(stream, relative_path)


class ContentFilenameValidator(ValidatorBase):
    """Only meaningful for the content area; metadata names are fixed."""

    def __init__(self, validator_id: str, severity: Severity, extra_characters: str = "") -> None:
        super().__init__(validator_id, severity)
        self._invalid = set(INVALID_NAME_CHARACTERS) | set(extra_characters)

    def validate_content(self, stream, relative_path, root):
        name = relative_path.name
        violations: List[Violation] = []
        invalid = sorted({c for c in name if c in self._invalid})
        if invalid:
            violations.append(
                self.violation(
                    f"Name '{name}' contains characters not allowed in node names: {''.join(invalid)}",
                    relative_path,
                )
            )
        if name != name.strip():
            violations.append(self.violation(f"Name '{name}' has leading or trailing whitespace", relative_path))
        return violations


class FilterDefinitionValidator(ValidatorBase):
    """Package-level check; only built for complete-package validation (include_package_only=True)."""

    def __init__(self, validator_id: str, severity: Severity) -> None:
        super().__init__(validator_id, severity)
        self._found = False

    def validate_metadata(self, stream, relative_path, root):
        if stream is not None and relative_path == FILTER_XML:
            self._found = True
        return None

    def done(self):
        if self._found:
            return None
        return [self.violation(f"No '{FILTER_XML}' found in META-INF")]


def _xml_factory(context: ValidationContext, settings: ValidatorSettings) -> XmlWellformednessValidator:
    return XmlWellformednessValidator("xml-wellformedness", settings.default_severity or Severity.ERROR)


def _filename_factory(context: ValidationContext, settings: ValidatorSettings) -> ContentFilenameValidator:
    return ContentFilenameValidator(
        "content-filename",
        settings.default_severity or Severity.ERROR,
        extra_characters=str(settings.options.get("additional_invalid_characters", "")),
    )


def _filter_factory(context: ValidationContext, settings: ValidatorSettings) -> FilterDefinitionValidator:
    return FilterDefinitionValidator("filter-definition", settings.default_severity or Severity.ERROR)


def register_builtin_validators(registry: ValidatorRegistry) -> None:
    registry.register("xml-wellformedness", _xml_factory)
    registry.register("content-filename", _filename_factory)
    registry.register("filter-definition", _filter_factory, package_only=True)
