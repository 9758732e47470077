# src/layout/resolver.py

"""
Resolution of the on-disk trees a validation run looks at.

Three roots make up a WorkingAreaLayout:

- metadata root:           parent of the first existing META-INF/vault
                           candidate (authoring-time metadata, optional)
- generated metadata root: <work directory>/META-INF, produced by the
                           generate-metadata stage (always part of the layout)
- content root:            first existing jcr_root candidate (optional)

Nothing here creates directories; an absent optional root simply means
"nothing to scan there".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from settings.schema import ValidateFilesSettings

log = logging.getLogger(__name__)

META_INF = "META-INF"


@dataclass(frozen=True)
class WorkingAreaLayout:
    """Resolved roots for a single run. Recomputed every run, never persisted."""
    metadata_root: Optional[Path]
    generated_metadata_root: Path
    content_root: Optional[Path]


def resolve_first_existing(candidates: Iterable[Path]) -> Optional[Path]:
    """
    Return the first candidate that exists and is a directory, else None.

    Order matters: a later candidate is never preferred even if it also exists.
    """
    for candidate in candidates:
        path = Path(candidate)
        if path.is_dir():
            return path
    return None


def resolve_working_area(default_root: Path, classifier: Optional[str], for_writing: bool) -> Path:
    """
    Return the (potentially classifier-specific) working directory.

    With a non-blank classifier the directory is "<default_root>-<classifier>".
    Readers fall back to default_root when that directory does not exist;
    writers always get the classifier directory and are expected to create it.
    """
    default_root = Path(default_root)
    if not classifier or not classifier.strip():
        return default_root

    classifier_root = Path(f"{default_root}-{classifier}")
    if not for_writing and not classifier_root.exists():
        log.warning(
            "Using regular work directory %s as classifier specific work directory does not exist at %s",
            default_root,
            classifier_root,
        )
        return default_root
    return classifier_root


def resolve_metadata_source(candidates: Iterable[Path]) -> Optional[Path]:
    """Return the first existing META-INF/vault directory, logging which one is used."""
    vault_dir = resolve_first_existing(candidates)
    if vault_dir is not None:
        log.info("Using META-INF/vault from %s", vault_dir)
    return vault_dir


def resolve_content_root(
    candidates: Iterable[Path],
    built_content_directory: Optional[Path] = None,
) -> Optional[Path]:
    """
    Return the directory holding the jcr_root payload.

    The deprecated explicit built_content_directory wins over the search path.
    """
    if built_content_directory is not None:
        log.warning(
            "The 'built_content_directory' setting is deprecated; use 'jcr_root_source_directory' instead."
        )
        return Path(built_content_directory)

    content_root = resolve_first_existing(candidates)
    if content_root is not None:
        log.info("Using jcr_root from %s", content_root)
    return content_root


def resolve_layout(settings: ValidateFilesSettings) -> WorkingAreaLayout:
    """Resolve all three roots for the given settings."""
    vault_dir = resolve_metadata_source(settings.meta_inf_vault_directory)
    metadata_root = vault_dir.parent if vault_dir is not None else None

    work_directory = resolve_working_area(settings.work_directory, settings.classifier, for_writing=False)
    generated_metadata_root = work_directory / META_INF

    content_root = resolve_content_root(
        settings.jcr_root_source_directory,
        settings.built_content_directory,
    )

    log.info(
        "Using generated metadata root %s and metadata root %s",
        generated_metadata_root,
        metadata_root,
    )
    return WorkingAreaLayout(
        metadata_root=metadata_root,
        generated_metadata_root=generated_metadata_root,
        content_root=content_root,
    )
