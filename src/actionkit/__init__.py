"""
actionkit: workflow command encoding and glob-based path resolution for
processes running under an Actions-style orchestrator.
"""

from actionkit.commands import Command, CommandIssuer, encode, parse_command
from actionkit.globbing import GlobPatternError, GlobResolver, GlobResolverConfig, GlobResult

__all__ = [
    "Command",
    "CommandIssuer",
    "GlobPatternError",
    "GlobResolver",
    "GlobResolverConfig",
    "GlobResult",
    "encode",
    "parse_command",
]
