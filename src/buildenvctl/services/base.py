"""BaseService — shared foundation for buildenvctl services.

Every service receives the frozen :class:`BuildEnvSettings` at construction
time and resolves project-relative paths through it.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from buildenvctl.config.settings import BuildEnvSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class ResolveService(BaseService):
            def resolve(self, mode: str | None) -> ServiceResult:
                source = self._project_path(self._settings.sources.env_file)
                ...
    """

    def __init__(self, settings: BuildEnvSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> BuildEnvSettings:
        return self._settings

    def _project_path(self, relative: str, root: Path | None = None) -> Path:
        """Resolve *relative* against *root* (default: the project root).

        Absolute paths and ``~`` paths are returned expanded, unchanged otherwise.
        """
        path = Path(relative).expanduser()
        if path.is_absolute():
            return path
        return (root or self._settings.project_root) / path
