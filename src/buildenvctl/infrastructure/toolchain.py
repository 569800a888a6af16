"""Toolchain version detection and installation lookup.

Both operations touch the filesystem a bounded number of times: one file
read for detection, at most two directory checks plus one file check for
lookup. Nothing is cached; every call re-reads the disk.
"""

from __future__ import annotations

import logging
from pathlib import Path

from buildenvctl.domain.models import ToolchainInstallation

logger = logging.getLogger(__name__)

DEFAULT_VERSION_FILE = "ProjectSettings/ProjectVersion.txt"
DEFAULT_VERSION_MARKER = "m_EditorVersion:"
DEFAULT_HUB_ROOT = "/Applications/Unity/Hub/Editor"
DEFAULT_BINARY_RELPATH = "Unity.app/Contents/MacOS/Unity"
DEFAULT_FALLBACK_SUFFIX = "f1"


class MissingVersionError(ValueError):
    """Raised when the locator is asked for an empty version."""


def extract_version(text: str, marker: str = DEFAULT_VERSION_MARKER) -> str | None:
    """Return the value after *marker* on the first line containing it.

    Examples:
        >>> extract_version("m_EditorVersion: 2022.3.5f1\\n")
        '2022.3.5f1'
        >>> extract_version("m_EditorVersionWithRevision: 2022.3.5f1 (abc)\\n") is None
        True
    """
    for line in text.splitlines():
        if marker in line:
            value = line.split(marker, 1)[1].strip()
            return value or None
    return None


def detect_version(
    project_root: Path,
    *,
    version_file: str = DEFAULT_VERSION_FILE,
    marker: str = DEFAULT_VERSION_MARKER,
) -> str | None:
    """Read the toolchain version from the project's metadata file.

    Returns None if the file is missing or has no marker line. The
    extracted token is not validated beyond being non-empty.
    """
    path = project_root / version_file
    if not path.is_file():
        logger.debug("Version file not found: %s", path)
        return None
    return extract_version(path.read_text(encoding="utf-8"), marker)


def locate_installation(
    version: str,
    *,
    hub_root: Path = Path(DEFAULT_HUB_ROOT),
    binary_relpath: str = DEFAULT_BINARY_RELPATH,
    fallback_suffix: str = DEFAULT_FALLBACK_SUFFIX,
) -> ToolchainInstallation | None:
    """Find the installed editor binary for *version* under *hub_root*.

    Checks ``<hub_root>/<version>`` first, then
    ``<hub_root>/<version><fallback_suffix>``. The first existing directory
    is used; if its binary is missing the result is None (the other
    candidate is not tried).

    Raises:
        MissingVersionError: if *version* is empty.
    """
    if not version:
        msg = "Toolchain version not provided to locate_installation"
        raise MissingVersionError(msg)

    candidates = [version]
    if fallback_suffix:
        candidates.append(f"{version}{fallback_suffix}")

    for dirname in candidates:
        install_dir = hub_root / dirname
        if not install_dir.is_dir():
            continue
        binary = install_dir / binary_relpath
        if binary.is_file():
            return ToolchainInstallation(version=dirname, path=binary)
        logger.debug("Installation dir %s has no binary at %s", install_dir, binary)
        return None

    return None
