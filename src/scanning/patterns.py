from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterable, Iterator, List, Pattern, Tuple, Union

from validation.errors import ConfigurationError


# Files and folders that never end up in a package. The packaging stage
# filters with exactly this list, so validation has to as well.
DEFAULT_EXCLUDES: Tuple[str, ...] = (
    # Miscellaneous typical temporary files
    "**/*~",
    "**/#*#",
    "**/.#*",
    "**/%*%",
    "**/._*",
    "**/.repository/**",
    # CVS
    "**/CVS",
    "**/CVS/**",
    "**/.cvsignore",
    # RCS
    "**/RCS",
    "**/RCS/**",
    # SCCS
    "**/SCCS",
    "**/SCCS/**",
    # Visual SourceSafe
    "**/vssver.scc",
    # MKS
    "**/project.pj",
    # Subversion
    "**/.svn",
    "**/.svn/**",
    # Arch
    "**/.arch-ids",
    "**/.arch-ids/**",
    # Bazaar
    "**/.bzr",
    "**/.bzr/**",
    # SurroundSCM
    "**/.MySCMServerInfo",
    # Mac
    "**/.DS_Store",
    # Serena Dimensions
    "**/.metadata",
    "**/.metadata/**",
    # Mercurial
    "**/.hg",
    "**/.hg/**",
    # git
    "**/.git",
    "**/.git/**",
    "**/.gitignore",
    "**/.gitattributes",
    # BitKeeper
    "**/BitKeeper",
    "**/BitKeeper/**",
    "**/ChangeSet",
    "**/ChangeSet/**",
    # darcs
    "**/_darcs",
    "**/_darcs/**",
    "**/.darcsrepo",
    "**/.darcsrepo/**",
    "**/-darcs-backup*",
    "**/.darcs-temp-mail",
)

REGEX_PREFIX = "%regex["
REGEX_SUFFIX = "]"


def _compile_segment(segment: str) -> Pattern[str]:
    """Translate one Ant path segment ("*.xml", "a?c") to a regex."""
    parts: List[str] = []
    for char in segment:
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts))


class AntPattern:
    """
    An Ant style path pattern.

    "**" matches zero or more path segments, "*" and "?" match within a single
    segment. A trailing "/" is shorthand for "/**".
    """

    def __init__(self, pattern: str) -> None:
        normalized = pattern.replace("\\", "/")
        if normalized.endswith("/"):
            normalized += "**"
        self.pattern = pattern
        self._segments: Tuple[Union[str, Pattern[str]], ...] = tuple(
            "**" if token == "**" else _compile_segment(token)
            for token in normalized.split("/")
            if token
        )

    def matches(self, parts: Tuple[str, ...]) -> bool:
        return self._match(0, parts, 0)

    def _match(self, seg_index: int, parts: Tuple[str, ...], part_index: int) -> bool:
        segments = self._segments
        while seg_index < len(segments):
            segment = segments[seg_index]
            if segment == "**":
                # collapse consecutive "**"
                while seg_index + 1 < len(segments) and segments[seg_index + 1] == "**":
                    seg_index += 1
                if seg_index + 1 == len(segments):
                    return True
                for start in range(part_index, len(parts) + 1):
                    if self._match(seg_index + 1, parts, start):
                        return True
                return False
            if part_index >= len(parts):
                return False
            if not segment.fullmatch(parts[part_index]):  # type: ignore[union-attr]
                return False
            seg_index += 1
            part_index += 1
        return part_index == len(parts)


class RegexPattern:
    """A "%regex[...]" pattern, fully matched against the "/"-separated path."""

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        expression = pattern[len(REGEX_PREFIX):-len(REGEX_SUFFIX)]
        try:
            self._regex = re.compile(expression)
        except re.error as exc:
            raise ConfigurationError(f"Malformed exclude pattern {pattern!r}: {exc}") from exc

    def matches(self, parts: Tuple[str, ...]) -> bool:
        return self._regex.fullmatch("/".join(parts)) is not None


def compile_pattern(pattern: str) -> Union[AntPattern, RegexPattern]:
    pattern = pattern.strip()
    if not pattern:
        raise ConfigurationError("Empty exclude pattern")
    if pattern.startswith(REGEX_PREFIX) and pattern.endswith(REGEX_SUFFIX) and len(pattern) > len(REGEX_PREFIX):
        return RegexPattern(pattern)
    return AntPattern(pattern)


@dataclass(frozen=True)
class ExcludePatternSet:
    """
    Immutable, pre-compiled set of exclude patterns.

    Built once when settings are loaded; use with_default_excludes() so the
    set always contains DEFAULT_EXCLUDES.
    """
    patterns: Tuple[str, ...]
    _compiled: Tuple[Union[AntPattern, RegexPattern], ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled", tuple(compile_pattern(p) for p in self.patterns))

    @classmethod
    def with_default_excludes(cls, custom: Iterable[str] = ()) -> "ExcludePatternSet":
        merged: List[str] = []
        for pattern in list(custom) + list(DEFAULT_EXCLUDES):
            pattern = pattern.strip()
            if pattern and pattern not in merged:
                merged.append(pattern)
        return cls(tuple(merged))

    def is_excluded(self, relative_path: Union[str, PurePosixPath]) -> bool:
        parts = tuple(p for p in PurePosixPath(relative_path).parts if p not in ("", "."))
        return any(compiled.matches(parts) for compiled in self._compiled)

    def __iter__(self) -> Iterator[str]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
