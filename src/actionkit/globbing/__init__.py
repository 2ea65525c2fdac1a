"""
Glob-based path resolution from include and exclude pattern lists.

Usage::

    from actionkit.globbing import GlobResolver, GlobResolverConfig

    config = GlobResolverConfig(include=("**/*.md",), exclude=("drafts/",))
    resolver = GlobResolver(config)
    files = resolver.resolve("docs")
    result = resolver.resolve_detailed("docs")
    if result.has_patterns and result.is_empty:
        ...
"""

from actionkit.globbing.patterns import GlobPatternError
from actionkit.globbing.resolver import GlobResolver
from actionkit.globbing.types import GlobResolverConfig, GlobResult

__all__ = [
    "GlobPatternError",
    "GlobResolver",
    "GlobResolverConfig",
    "GlobResult",
]
