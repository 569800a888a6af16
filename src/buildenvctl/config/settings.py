"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``BUILDENVCTL_*`` prefix
  3. TOML file    — ``buildenvctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
delegates file discovery and the project-root decision to
:mod:`buildenvctl.config.discovery`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from buildenvctl.config.discovery import ConfigNotFoundError, ConfigOrigin, locate_config
from buildenvctl.config.models import KeystoreConfig, SourcesConfig, ToolchainConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``buildenvctl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                import click

                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class BuildEnvSettings(BaseSettings):
    """Unified settings for the entire buildenvctl CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.  Stored in
    ``click.Context.obj`` at the CLI root level.

    Attributes:
        project_root: Resolved project directory (parent of
            ``buildenvctl.toml``, or CWD if no config found).
        config_path: The TOML file actually read, or None.
        config_origin: Which lookup rule produced *config_path*.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "BUILDENVCTL_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (derived from config location, not read from TOML) ---
    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    config_origin: ConfigOrigin = ConfigOrigin.DEFAULTS

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    toolchain: ToolchainConfig = Field(default_factory=ToolchainConfig)
    sources: SourcesConfig = Field(default_factory=SourcesConfig)
    keystore: KeystoreConfig = Field(default_factory=KeystoreConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> BuildEnvSettings:
        """Construct settings from CLI invocation.

        :func:`~buildenvctl.config.discovery.locate_config` picks the TOML
        file and the project root; CLI flags are merged as highest-priority
        overrides.

        Raises:
            click.ClickException: if *config_path* names a missing file.
        """
        try:
            location = locate_config(config_path, project_root)
        except ConfigNotFoundError as exc:
            import click

            raise click.ClickException(str(exc)) from exc

        _tls.toml_path = location.config_path
        try:
            return cls(
                project_root=location.project_root,
                config_path=location.config_path,
                config_origin=location.origin,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
