"""Frozen records passed between the resolver, the provisioning flow and the CLI.

Every model is immutable after construction; callers thread them through
explicitly instead of exporting values into a shared process namespace.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field, SecretStr

from buildenvctl.domain.types import BuildMode, SourceFormat


class ConfigSource(BaseModel):
    """A named origin of key/value settings."""

    model_config = {"frozen": True}

    name: str
    path: Path
    format: SourceFormat = SourceFormat.ENV


class LoadedSource(BaseModel):
    """Result of reading one ConfigSource. ``found`` is False for absent files."""

    model_config = {"frozen": True}

    source: ConfigSource
    found: bool
    values: dict[str, str] = Field(default_factory=dict)


class ToolchainInstallation(BaseModel):
    """An installed toolchain discovered on disk. Never cached."""

    model_config = {"frozen": True}

    version: str
    path: Path


class ResolvedConfig(BaseModel):
    """The merged build environment produced once per run.

    Attributes:
        mode: Always a BuildMode member.
        project_root: Directory the metadata file and sources were read from.
        toolchain_version: Detected (or configured) version, None if unknown.
        toolchain_path: Editor binary, None if not installed or not resolvable.
        settings: Merged key/value settings, last source wins.
        sources_loaded: Names of the sources that were found and read.
        warnings: Best-effort steps that did not produce a value.
    """

    model_config = {"frozen": True}

    mode: BuildMode
    project_root: Path
    toolchain_version: str | None = None
    toolchain_path: Path | None = None
    settings: dict[str, str] = Field(default_factory=dict)
    sources_loaded: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class CertificateSubject(BaseModel):
    """Distinguished-name fields embedded in the signing certificate."""

    model_config = {"frozen": True}

    common_name: str
    org_unit: str
    org: str
    locality: str
    state: str
    country_code: str

    @property
    def distinguished_name(self) -> str:
        """Render as ``CN=.., OU=.., O=.., L=.., ST=.., C=..``."""
        return (
            f"CN={self.common_name}, OU={self.org_unit}, O={self.org}, "
            f"L={self.locality}, ST={self.state}, C={self.country_code}"
        )


class CredentialRequest(BaseModel):
    """Everything the key-generation capability needs to create a keystore."""

    model_config = {"frozen": True}

    keystore_path: Path
    alias: str
    keystore_password: SecretStr
    key_password: SecretStr
    subject: CertificateSubject


class PersistedCredentialRecord(BaseModel):
    """The four credential entries written back into an env file."""

    model_config = {"frozen": True}

    keystore_path: Path
    keystore_password: SecretStr
    alias: str
    key_password: SecretStr

    @classmethod
    def from_request(cls, request: CredentialRequest) -> PersistedCredentialRecord:
        return cls(
            keystore_path=request.keystore_path,
            keystore_password=request.keystore_password,
            alias=request.alias,
            key_password=request.key_password,
        )

    def entries(self, names: dict[str, str]) -> dict[str, str]:
        """Map the record onto env entry names.

        *names* maps field name (``keystore_path``, ``keystore_password``,
        ``alias``, ``key_password``) to the variable written in the file.
        """
        return {
            names["keystore_path"]: str(self.keystore_path),
            names["keystore_password"]: self.keystore_password.get_secret_value(),
            names["alias"]: self.alias,
            names["key_password"]: self.key_password.get_secret_value(),
        }
