"""Validation and compilation of glob patterns using pathspec."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath

import pathspec


class GlobPatternError(ValueError):
    """Raised for a malformed include or exclude pattern."""


def _unbalanced_bracket(pattern: str) -> bool:
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == "[":
            # A `]` directly after `[` (or `[!`) is a literal member of the class.
            j = i + 1
            if j < len(pattern) and pattern[j] in "!^":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close < 0:
                return True
            i = close + 1
            continue
        i += 1
    return False


def validate_pattern(pattern: str, kind: str = "include") -> None:
    """Raise `GlobPatternError` if `pattern` is not a usable glob."""
    if not pattern.strip():
        raise GlobPatternError(f"Empty {kind} pattern: {pattern!r}")
    if pattern.startswith("!"):
        raise GlobPatternError(
            f"Negated {kind} pattern {pattern!r}: use the exclude list instead of a '!' prefix"
        )
    if not pattern.strip("/"):
        raise GlobPatternError(f"{kind.capitalize()} pattern has no path component: {pattern!r}")
    if "***" in pattern:
        raise GlobPatternError(f"Invalid wildcard run '***' in {kind} pattern: {pattern!r}")
    if pattern.endswith("\\") and not pattern.endswith("\\\\"):
        raise GlobPatternError(f"Dangling escape at end of {kind} pattern: {pattern!r}")
    if _unbalanced_bracket(pattern):
        raise GlobPatternError(f"Unclosed '[' in {kind} pattern: {pattern!r}")


def anchor_pattern(pattern: str) -> str:
    """
    Anchor a pattern to the resolution root, so `*.txt` matches only top-level
    files and only `**` crosses directories.
    """
    if pattern.startswith("./"):
        pattern = pattern[2:]
    if pattern.startswith("/") or pattern.startswith("**/") or pattern == "**":
        return pattern
    return "/" + pattern


def _compile(lines: Sequence[str], kind: str) -> pathspec.PathSpec:
    try:
        return pathspec.PathSpec.from_lines("gitignore", lines)
    except ValueError as e:
        raise GlobPatternError(f"Invalid {kind} patterns {list(lines)!r}: {e}") from e


@dataclass(frozen=True)
class _CompiledPattern:
    """
    One anchored pattern. pathspec also matches a non-directory pattern against
    everything below a matching directory; `depth` and `tail` narrow file
    matches back to the pattern itself.
    """

    spec: pathspec.PathSpec
    # Exact segment count, for patterns without a `**` segment.
    depth: int | None
    # Matcher for the last segment, when it follows a `**` segment.
    tail: pathspec.PathSpec | None

    def match_file(self, rel: PurePosixPath) -> bool:
        if not self.spec.match_file(rel.as_posix()):
            return False
        if self.depth is not None and len(rel.parts) != self.depth:
            return False
        if self.tail is not None and not self.tail.match_file(rel.name):
            return False
        return True


def _compile_one(pattern: str, kind: str) -> _CompiledPattern:
    anchored = anchor_pattern(pattern)
    spec = _compile([anchored], kind)
    if anchored.endswith("/"):
        # Directory pattern: matches everything below the directory.
        return _CompiledPattern(spec, None, None)
    segments = anchored.strip("/").split("/")
    if "**" not in segments:
        return _CompiledPattern(spec, len(segments), None)
    if segments[-1] == "**":
        return _CompiledPattern(spec, None, None)
    tail = segments[-1]
    if tail[0] in "!#":
        tail = "\\" + tail
    return _CompiledPattern(spec, None, _compile([tail], kind))


class GlobPatterns:
    """
    Validated, compiled include or exclude patterns. Built once per resolver so
    repeated queries reuse the compiled form.
    """

    def __init__(self, patterns: Sequence[str], kind: str = "include") -> None:
        for pattern in patterns:
            validate_pattern(pattern, kind)
        self.patterns: tuple[str, ...] = tuple(patterns)
        self._compiled = tuple(_compile_one(pattern, kind) for pattern in patterns)
        dir_patterns = [anchor_pattern(p) for p in patterns if p.endswith("/")]
        self._dir_spec: pathspec.PathSpec | None = (
            _compile(dir_patterns, kind) if dir_patterns else None
        )

    def __bool__(self) -> bool:
        return bool(self._compiled)

    def match_file(self, rel: PurePosixPath) -> bool:
        """Match a file path relative to the root."""
        return any(compiled.match_file(rel) for compiled in self._compiled)

    def match_dir(self, rel: PurePosixPath) -> bool:
        """Match a directory path relative to the root against directory patterns."""
        return self._dir_spec is not None and self._dir_spec.match_file(f"{rel.as_posix()}/")
