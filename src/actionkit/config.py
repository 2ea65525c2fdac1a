"""
TOML-based config file loading for actionkit.

Searches for `.actionkit.toml`, `actionkit.toml`, or `pyproject.toml [tool.actionkit]`
walking up from a start directory. Values are merged with explicit arguments
using three-way precedence: explicit arguments > config file > built-in defaults.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, cast

import structlog

from actionkit.globbing.types import GlobResolverConfig

if sys.version_info >= (3, 11):
    import tomllib  # pyright: ignore[reportUnreachable]
else:
    import tomli as tomllib  # type: ignore[no-redef]  # pyright: ignore[reportUnreachable]

log = structlog.get_logger(__name__)


@dataclass
class ActionkitConfig:
    """
    Parsed config from a TOML file. Fields are `None` when not set in the config,
    so callers can tell "not configured" from "explicitly set to the default".
    """

    # Glob resolution
    include: list[str] | None = None
    exclude: list[str] | None = None
    # Logging
    verbose: bool | None = None
    log_json: bool | None = None


# Config file search order (first match wins within each directory level)
_CONFIG_FILENAMES = [".actionkit.toml", "actionkit.toml", "pyproject.toml"]

_TOOL_KEY = "actionkit"

_LIST_FIELDS = {"include", "exclude"}
_BOOL_FIELDS = {"verbose", "log_json"}

_VALID_FIELDS = {f.name for f in fields(ActionkitConfig)}


def find_config_file(start_dir: Path) -> Path | None:
    """
    Walk up from `start_dir` looking for a config file. Returns the first
    found, or `None`. Search order per directory: `.actionkit.toml` >
    `actionkit.toml` > `pyproject.toml` (only if it has `[tool.actionkit]`).
    """
    current = start_dir.resolve()
    while True:
        for filename in _CONFIG_FILENAMES:
            candidate = current / filename
            if candidate.is_file():
                if filename == "pyproject.toml":
                    if _pyproject_has_section(candidate):
                        return candidate
                else:
                    return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def _pyproject_has_section(path: Path) -> bool:
    try:
        data = tomllib.loads(path.read_text())
        return _TOOL_KEY in data.get("tool", {})
    except (tomllib.TOMLDecodeError, OSError):
        return False


def load_config(config_path: Path) -> ActionkitConfig:
    """
    Load an `ActionkitConfig` from a TOML file. Supports standalone
    `actionkit.toml` / `.actionkit.toml` and `pyproject.toml` (extracts
    `[tool.actionkit]`). TOML kebab-case keys are mapped to snake_case.
    Malformed TOML is logged and yields an empty config.
    """
    try:
        data = tomllib.loads(config_path.read_text())
    except tomllib.TOMLDecodeError as e:
        log.warning("malformed_config", path=str(config_path), error=str(e))
        return ActionkitConfig()

    if config_path.name == "pyproject.toml":
        data = data.get("tool", {}).get(_TOOL_KEY, {})

    return _parse_config_data(data)


def _parse_config_data(data: dict[str, Any]) -> ActionkitConfig:
    """Parse a flat or sectioned TOML dict into ActionkitConfig."""
    # Flatten sections: [glob] and [logging] merge into top level
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            for sub_key, sub_value in cast(dict[str, Any], value).items():
                flat[sub_key] = sub_value
        else:
            flat[key] = value

    mapped: dict[str, Any] = {}
    for key, value in flat.items():
        snake_key = key.replace("-", "_")
        if snake_key not in _VALID_FIELDS:
            log.warning("unrecognized_config_key", key=key)
            continue
        if snake_key in _LIST_FIELDS:
            if isinstance(value, str):
                value = [value]
            if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
                raise ValueError(f"Config key {key!r} must be a list of strings, got {value!r}")
        elif snake_key in _BOOL_FIELDS and not isinstance(value, bool):
            raise ValueError(f"Config key {key!r} must be a boolean, got {value!r}")
        mapped[snake_key] = value

    return ActionkitConfig(**mapped)


def resolver_config_from(
    config: ActionkitConfig | None,
    include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
) -> GlobResolverConfig:
    """
    Build a `GlobResolverConfig`. Explicit `include`/`exclude` win over the
    config file, which wins over empty defaults.
    """
    if include is None:
        include = config.include if config and config.include is not None else []
    if exclude is None:
        exclude = config.exclude if config and config.exclude is not None else []
    return GlobResolverConfig.from_patterns(include, exclude)


def apply_logging_config(
    config: ActionkitConfig | None,
    verbose: bool | None = None,
    log_json: bool | None = None,
) -> None:
    """Configure logging with explicit arguments > config file > defaults."""
    from actionkit.logging_setup import configure_logging

    if verbose is None:
        verbose = bool(config and config.verbose)
    if log_json is None:
        log_json = bool(config and config.log_json)
    configure_logging(verbose=verbose, log_json=log_json)
