import logging
import os
from pathlib import Path, PurePosixPath
from typing import Iterator, List

from spec.types import EntryKind, ResourceArea, ScanEntry

from .patterns import ExcludePatternSet

log = logging.getLogger(__name__)


class ContentScanner:
    """
    Recursive directory scanner used for every root of a validation run.

    Implementation notes:
    - Excluded directories are not yielded but are still descended into;
      their children are matched against the patterns on their own. The
      default excludes list "**/.git" and "**/.git/**" for that reason.
    - All files are yielded before any directory, each group sorted by
      relative path, so violation output is reproducible.
    - Nothing is cached: every call walks the tree again.
    """

    def scan(self, root: Path, excludes: ExcludePatternSet, area: ResourceArea) -> Iterator[ScanEntry]:
        root = Path(root)
        if not root.is_dir():
            log.warning("Skipping scan of '%s' as it is not an existing directory", root)
            return

        log.info("Scanning base directory '%s'...", root)
        files: List[PurePosixPath] = []
        directories: List[PurePosixPath] = []

        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            # Sort in place so os.walk descends deterministically
            dirnames.sort()
            relative_dir = PurePosixPath(Path(dirpath).relative_to(root).as_posix())

            for filename in filenames:
                relative = relative_dir / filename
                if not excludes.is_excluded(relative):
                    files.append(relative)

            for dirname in dirnames:
                relative = relative_dir / dirname
                if not excludes.is_excluded(relative):
                    directories.append(relative)

        for relative in sorted(files):
            yield ScanEntry(relative_path=relative, kind=EntryKind.FILE, area=area)
        for relative in sorted(directories):
            yield ScanEntry(relative_path=relative, kind=EntryKind.DIRECTORY, area=area)

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        log.error("Could not list directory '%s': %s", error.filename, error)
