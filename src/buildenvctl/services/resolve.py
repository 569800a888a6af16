"""ResolveService — build environment resolution.

Pipeline: PARSE MODE → LOAD SOURCES → DETECT VERSION → LOCATE → REPORT

Only mode parsing is fatal. Every later step is best-effort: a missing
source, an undetectable version or an uninstalled toolchain becomes a
warning on the result, because downstream build actions may supply their
own explicit paths.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from buildenvctl.domain.models import ConfigSource, LoadedSource, ResolvedConfig
from buildenvctl.domain.types import BuildMode, InvalidModeError, SourceFormat
from buildenvctl.infrastructure.sources import load_sources, merge_sources
from buildenvctl.infrastructure.toolchain import (
    MissingVersionError,
    detect_version,
    locate_installation,
)
from buildenvctl.services.base import BaseService
from buildenvctl.services.result import ServiceResult

log = structlog.get_logger(__name__)

USAGE = "Usage: buildenvctl resolve [dev|prod]"


class ResolveService(BaseService):
    """Detects the toolchain and merges configuration sources for one run."""

    # ------------------------------------------------------------------
    # Sources
    # ------------------------------------------------------------------

    def config_sources(self, project_root: Path | None = None) -> list[ConfigSource]:
        """Sources in merge order: generic env file, project script, extras."""
        cfg = self._settings.sources
        sources = [
            ConfigSource(
                name=".env",
                path=self._project_path(cfg.env_file, project_root),
                format=SourceFormat.ENV,
            ),
            ConfigSource(
                name="project-config",
                path=self._project_path(cfg.project_config, project_root),
                format=SourceFormat.SCRIPT,
            ),
        ]
        for extra in cfg.extra:
            sources.append(
                ConfigSource(
                    name=Path(extra).name,
                    path=self._project_path(extra, project_root),
                    format=SourceFormat.ENV,
                )
            )
        return sources

    def load_sources(self, project_root: Path | None = None) -> list[LoadedSource]:
        """Load every source in merge order; later ones see earlier values."""
        return load_sources(self.config_sources(project_root))

    # ------------------------------------------------------------------
    # Toolchain
    # ------------------------------------------------------------------

    def detect(self, project_root: Path | None = None) -> ServiceResult:
        """Read the toolchain version from the project metadata file."""
        op = "detect_version"
        root = project_root or self._settings.project_root
        tc = self._settings.toolchain
        version = detect_version(root, version_file=tc.version_file, marker=tc.version_marker)
        if version is None:
            return ServiceResult.failure(
                op,
                "VERSION_NOT_FOUND",
                f"No '{tc.version_marker}' line in {root / tc.version_file}",
                detail={"version_file": str(root / tc.version_file)},
            )
        return ServiceResult(ok=True, op=op, data={"version": version})

    def locate(self, version: str) -> ServiceResult:
        """Find the installed editor binary for *version*."""
        op = "locate_toolchain"
        tc = self._settings.toolchain
        try:
            install = locate_installation(
                version,
                hub_root=Path(tc.hub_root).expanduser(),
                binary_relpath=tc.binary_relpath,
                fallback_suffix=tc.fallback_suffix,
            )
        except MissingVersionError as exc:
            return ServiceResult.failure(op, "MISSING_VERSION", str(exc))

        if install is None:
            return ServiceResult.failure(
                op,
                "TOOLCHAIN_NOT_FOUND",
                f"Toolchain {version} not found under {tc.hub_root}",
                detail={"version": version, "hub_root": tc.hub_root},
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"version": install.version, "path": str(install.path)},
        )

    # ------------------------------------------------------------------
    # Full resolution
    # ------------------------------------------------------------------

    def resolve(self, mode_arg: str | None, project_root: Path | None = None) -> ServiceResult:
        """PARSE MODE → LOAD SOURCES → DETECT VERSION → LOCATE → REPORT."""
        op = "resolve"

        try:
            mode = BuildMode.parse(mode_arg)
        except InvalidModeError as exc:
            return ServiceResult.failure(op, "INVALID_MODE", str(exc), detail={"usage": USAGE})

        root = project_root or self._settings.project_root
        tc = self._settings.toolchain
        warnings: list[str] = []

        # LOAD SOURCES
        loaded = self.load_sources(root)
        for item in loaded:
            if not item.found:
                warnings.append(f"{item.source.name} not found at {item.source.path}")
        settings = merge_sources(loaded)

        # DETECT VERSION
        version = detect_version(root, version_file=tc.version_file, marker=tc.version_marker)
        if version is None and settings.get(tc.version_key):
            version = settings[tc.version_key]
            log.debug("version_from_settings", key=tc.version_key, version=version)
        if version is None:
            warnings.append(f"Could not detect toolchain version from {root / tc.version_file}")

        # LOCATE
        toolchain_path: Path | None = None
        if version is not None:
            located = self.locate(version)
            if located.ok:
                toolchain_path = Path(located.data["path"])
            else:
                override = settings.get(tc.path_key)
                if override and Path(override).expanduser().is_file():
                    toolchain_path = Path(override).expanduser()
                    log.debug("toolchain_path_from_settings", key=tc.path_key)
                elif located.error is not None:
                    warnings.append(located.error.message)

        resolved = ResolvedConfig(
            mode=mode,
            project_root=root,
            toolchain_version=version,
            toolchain_path=toolchain_path,
            settings=settings,
            sources_loaded=[item.source.name for item in loaded if item.found],
            warnings=warnings,
        )
        log.debug(
            "resolved",
            mode=mode.value,
            version=version,
            toolchain_path=str(toolchain_path) if toolchain_path else None,
            keys=len(settings),
        )
        return ServiceResult(
            ok=True,
            op=op,
            data=resolved.model_dump(mode="json"),
            warnings=warnings,
        )
