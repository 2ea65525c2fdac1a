"""Configuration and result types for glob resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class GlobResolverConfig:
    """
    Include and exclude patterns, in gitignore-style glob syntax.

    Exclusion is expressed only through `exclude`; `!` negation prefixes are
    rejected when the resolver compiles the patterns.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_patterns(
        cls, include: Iterable[str] = (), exclude: Iterable[str] = ()
    ) -> GlobResolverConfig:
        return cls(include=tuple(include), exclude=tuple(exclude))

    @property
    def has_patterns(self) -> bool:
        return bool(self.include)


@dataclass(frozen=True)
class GlobResult:
    """
    Outcome of one resolution. `has_patterns=False` means nothing was configured
    to match, which callers treat differently from patterns that matched nothing.
    """

    files: tuple[Path, ...] = field(default=())
    has_patterns: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.files

    @property
    def has_matches(self) -> bool:
        return bool(self.files)
