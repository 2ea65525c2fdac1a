"""
GlobResolver: main entry point for glob resolution.

Resolves configured include/exclude patterns under a base directory into a
deduplicated, sorted list of concrete file paths.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath

import structlog

from actionkit.globbing.patterns import GlobPatterns
from actionkit.globbing.types import GlobResolverConfig, GlobResult

log = structlog.get_logger(__name__)


class GlobResolver:
    """
    Matches files under a base directory against include patterns, dropping any
    that match an exclude pattern. Patterns are compiled once here and reused
    for every query, so one resolver can serve many directories.

    The filesystem is read while other processes may be writing to it, so
    unreadable or vanished directories count as having no matches.
    """

    def __init__(self, config: GlobResolverConfig) -> None:
        self._config: GlobResolverConfig = config
        self._include: GlobPatterns = GlobPatterns(config.include, "include")
        self._exclude: GlobPatterns = GlobPatterns(config.exclude, "exclude")

    @classmethod
    def from_patterns(cls, include: Iterable[str], exclude: Iterable[str] = ()) -> GlobResolver:
        return cls(GlobResolverConfig.from_patterns(include, exclude))

    @property
    def config(self) -> GlobResolverConfig:
        return self._config

    def resolve(self, directory: str | Path | None = None) -> list[Path]:
        """Resolve matching files under `directory` (default: current directory)."""
        return list(self.resolve_detailed(directory).files)

    def resolve_detailed(self, directory: str | Path | None = None) -> GlobResult:
        """
        Resolve matching files under `directory`, returning a `GlobResult` that
        also records whether any include patterns were configured.
        """
        if not self._config.has_patterns:
            return GlobResult(files=(), has_patterns=False)

        root = self._root(directory)
        if root is None:
            return GlobResult(files=(), has_patterns=True)

        # Sort before deduplicating so the lexically first alias of a file wins.
        found_paths = sorted(self._walk_directory(root))
        seen: set[str] = set()
        result: list[Path] = []
        for found in found_paths:
            real = os.path.realpath(found)
            if real not in seen:
                seen.add(real)
                result.append(found)

        log.debug("glob_resolved", root=str(root), matches=len(result))
        return GlobResult(files=tuple(result), has_patterns=True)

    def _root(self, directory: str | Path | None) -> Path | None:
        try:
            return Path(directory).resolve() if directory is not None else Path.cwd()
        except OSError as e:
            log.debug("glob_root_unavailable", directory=str(directory), error=str(e))
            return None

    def _walk_directory(self, root: Path) -> Iterator[Path]:
        """
        Walk a directory tree using `os.walk()`, pruning excluded directories
        in-place so they are never entered.
        """
        for dirpath, dirnames, filenames in os.walk(root, onerror=self._on_walk_error):
            current = Path(dirpath)
            rel_dir = PurePosixPath(current.relative_to(root).as_posix())

            dirnames[:] = [d for d in dirnames if not self._exclude.match_dir(rel_dir / d)]

            for filename in filenames:
                rel = rel_dir / filename
                if not self._include.match_file(rel):
                    continue
                if self._exclude.match_file(rel):
                    continue
                yield current / filename

    def _on_walk_error(self, error: OSError) -> None:
        log.debug("glob_walk_error", path=error.filename, error=str(error))
