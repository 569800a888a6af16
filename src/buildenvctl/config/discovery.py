"""Locate ``buildenvctl.toml`` and decide which directory is the project root.

A Unity project keeps its ``ProjectSettings/`` and ``Scripts/`` next to the
config file, so the config location doubles as the project root. Lookup
order for the file: ``--config``, then ``BUILDENVCTL_CONFIG``, then a walk
up from the start directory (the way git finds ``.git/``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

CONFIG_FILENAME = "buildenvctl.toml"
CONFIG_ENV_VAR = "BUILDENVCTL_CONFIG"


class ConfigOrigin(StrEnum):
    """Which rule produced the config file (or that none was found)."""

    EXPLICIT = "--config"
    ENV_VAR = CONFIG_ENV_VAR
    WALK_UP = "walk-up"
    DEFAULTS = "defaults"


class ConfigNotFoundError(FileNotFoundError):
    """Raised when ``--config`` names a file that does not exist."""


@dataclass(frozen=True)
class ConfigLocation:
    """Resolved config file and project root for one invocation."""

    config_path: Path | None
    project_root: Path
    origin: ConfigOrigin


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for buildenvctl.toml.

    ``BUILDENVCTL_CONFIG`` short-circuits the walk; if it names a missing
    file the result is None rather than a file further up.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def locate_config(
    config_path: str | Path | None = None,
    project_root: Path | None = None,
) -> ConfigLocation:
    """Pick the config file and the project root.

    The project root is *project_root* when given, else the config file's
    directory, else the cwd.

    Raises:
        ConfigNotFoundError: if *config_path* is given but is not a file.
    """
    if config_path:
        path: Path | None = Path(config_path).expanduser()
        if not path.is_file():
            msg = f"Config file not found: {path}"
            raise ConfigNotFoundError(msg)
        origin = ConfigOrigin.EXPLICIT
    else:
        path = find_config(project_root)
        if path is None:
            origin = ConfigOrigin.DEFAULTS
        elif os.environ.get(CONFIG_ENV_VAR):
            origin = ConfigOrigin.ENV_VAR
        else:
            origin = ConfigOrigin.WALK_UP

    if project_root is not None:
        root = project_root
    elif path is not None:
        root = path.parent
    else:
        root = Path.cwd()
    return ConfigLocation(config_path=path, project_root=root, origin=origin)
