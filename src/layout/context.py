# src/layout/context.py

"""
Validation context handed to validator factories.

Exposes the resolved roots and the identity of the package being built.
The identity is read from vault/properties.xml (Java XML properties format)
below the generated metadata root first, then the metadata root, and
finally taken from the 'package' settings.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from settings.schema import PackageSettings

from .resolver import WorkingAreaLayout

log = logging.getLogger(__name__)

PROPERTIES_XML = Path("vault") / "properties.xml"


@dataclass(frozen=True)
class PackageId:
    group: Optional[str]
    name: Optional[str]
    version: Optional[str]

    def __str__(self) -> str:
        return ":".join(part or "" for part in (self.group, self.name, self.version))


@dataclass(frozen=True)
class ValidationContext:
    layout: WorkingAreaLayout
    package_id: PackageId
    properties: Dict[str, str]

    @property
    def metadata_root(self) -> Optional[Path]:
        return self.layout.metadata_root

    @property
    def generated_metadata_root(self) -> Path:
        return self.layout.generated_metadata_root

    @property
    def content_root(self) -> Optional[Path]:
        return self.layout.content_root


def read_properties_xml(path: Path) -> Dict[str, str]:
    """
    Parse a Java XML properties file:

        <properties>
          <entry key="name">my-package</entry>
        </properties>

    Returns an empty dict if the file is unreadable or malformed.
    """
    try:
        tree = ET.parse(path)
    except (OSError, ET.ParseError) as exc:
        log.warning("Could not read package properties from %s: %s", path, exc)
        return {}

    properties: Dict[str, str] = {}
    for entry in tree.getroot().iter("entry"):
        key = entry.get("key")
        if key:
            properties[key] = (entry.text or "").strip()
    return properties


def _find_properties(layout: WorkingAreaLayout) -> Dict[str, str]:
    for root in (layout.generated_metadata_root, layout.metadata_root):
        if root is None:
            continue
        candidate = root / PROPERTIES_XML
        if candidate.is_file():
            log.debug("Reading package properties from %s", candidate)
            return read_properties_xml(candidate)
    return {}


def build_validation_context(layout: WorkingAreaLayout, package: PackageSettings) -> ValidationContext:
    properties = _find_properties(layout)
    package_id = PackageId(
        group=properties.get("group") or package.group,
        name=properties.get("name") or package.name,
        version=properties.get("version") or package.version,
    )
    return ValidationContext(layout=layout, package_id=package_id, properties=properties)
