from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from spec.types import ScanEntry, Violation
from spec.validation import ValidatorChain

from .reporter import ViolationReporter

log = logging.getLogger(__name__)


class ValidationDispatcher:
    """
    Routes scanned resources to the validator chain.

    - METADATA entries go to validate_metadata, CONTENT entries to
      validate_content; the area was fixed by the scanner from the root the
      entry came from.
    - Files are validated as byte streams, directories with stream=None.
    - A resource that vanished or cannot be read is logged and skipped; the
      run continues with the next entry.
    """

    def __init__(self, chain: ValidatorChain, reporter: ViolationReporter) -> None:
        self._chain = chain
        self._reporter = reporter

    def dispatch(self, root: Path, entry: ScanEntry) -> List[Violation]:
        absolute = Path(root) / entry.relative_path
        self._reporter.clear_prior(absolute)

        if entry.is_file:
            violations = self._validate_file(root, entry, absolute)
        else:
            violations = self._validate_directory(root, entry, absolute)

        self._reporter.record(absolute, violations)
        return violations

    def _validate_file(self, root: Path, entry: ScanEntry, absolute: Path) -> List[Violation]:
        log.debug("Validating file '%s'...", absolute)
        try:
            with absolute.open("rb") as stream:
                if entry.is_metadata:
                    return self._chain.validate_metadata(stream, entry.relative_path, root)
                return self._chain.validate_content(stream, entry.relative_path, root)
        except FileNotFoundError as exc:
            log.error("Could not find file %s: %s", absolute, exc)
        except OSError as exc:
            log.error("Could not validate file %s: %s", absolute, exc)
        return []

    def _validate_directory(self, root: Path, entry: ScanEntry, absolute: Path) -> List[Violation]:
        log.debug("Validating folder '%s'...", absolute)
        try:
            if entry.is_metadata:
                return self._chain.validate_metadata(None, entry.relative_path, root)
            return self._chain.validate_content(None, entry.relative_path, root)
        except OSError as exc:
            log.error("Could not validate folder %s: %s", absolute, exc)
        return []
