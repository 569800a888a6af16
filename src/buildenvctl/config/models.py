"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, buildenvctl.toml only contains
overrides. A typical Unity project on macOS needs no config file at all.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

# --- buildenvctl.toml sections ---


class ToolchainConfig(BaseModel):
    """[toolchain] section."""

    model_config = {"frozen": True}

    hub_root: str = "/Applications/Unity/Hub/Editor"
    binary_relpath: str = "Unity.app/Contents/MacOS/Unity"
    version_file: str = "ProjectSettings/ProjectVersion.txt"
    version_marker: str = "m_EditorVersion:"
    # Unity Hub installs patch releases as "<version>f1".
    fallback_suffix: str = "f1"
    # Settings keys consulted when detection or location comes up empty.
    version_key: str = "UNITY_VERSION"
    path_key: str = "UNITY_PATH"


class SourcesConfig(BaseModel):
    """[sources] section. Paths are relative to the project root."""

    model_config = {"frozen": True}

    env_file: str = "Scripts/.env"
    project_config: str = "project-config.sh"
    extra: list[str] = Field(default_factory=list)


class SubjectDefaults(BaseModel):
    """[keystore.subject] section."""

    model_config = {"frozen": True}

    common_name: str = "Boardible Team"
    org_unit: str = "Development"
    org: str = "Boardible"
    locality: str = "Your City"
    state: str = "Your State"
    country_code: str = "US"


class CredentialEntriesConfig(BaseModel):
    """[keystore.entries] section — variable names written on persistence."""

    model_config = {"frozen": True}

    keystore_path: str = "ANDROID_KEYSTORE_PATH"
    keystore_password: str = "ANDROID_KEYSTORE_PASS"
    alias: str = "ANDROID_KEY_ALIAS"
    key_password: str = "ANDROID_KEY_PASS"


class KeystoreConfig(BaseModel):
    """[keystore] section."""

    model_config = {"frozen": True}

    default_path: str = "~/android-signing.keystore"
    default_alias: str = "release"
    validity_days: int = 10000
    key_algorithm: str = "RSA"
    key_size: int = 2048
    min_password_length: int = 6
    # 0 means retry until the operator gets it right (or interrupts).
    max_password_attempts: int = 5
    env_file: str = "Scripts/.env.android.local"
    listing_lines: int = 20
    keytool: str = "keytool"
    subject: SubjectDefaults = Field(default_factory=SubjectDefaults)
    entries: CredentialEntriesConfig = Field(default_factory=CredentialEntriesConfig)
