"""Shared pytest fixtures and test helpers for buildenvctl tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
from click.testing import CliRunner

from buildenvctl.config.settings import BuildEnvSettings
from buildenvctl.domain.models import CredentialRequest
from buildenvctl.infrastructure.keytool import KeygenOutcome, KeygenParams

BINARY_RELPATH = "Unity.app/Contents/MacOS/Unity"


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's BUILDENVCTL_* variables out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("BUILDENVCTL_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary Unity project with the standard directory layout."""
    root = tmp_path / "project"
    (root / "ProjectSettings").mkdir(parents=True)
    (root / "Scripts").mkdir()
    return root


@pytest.fixture
def hub_root(tmp_path: Path) -> Path:
    """Empty toolchain installation root."""
    hub = tmp_path / "Hub" / "Editor"
    hub.mkdir(parents=True)
    return hub


@pytest.fixture
def settings(project_root: Path, hub_root: Path) -> BuildEnvSettings:
    """Settings pointing at the temp project and hub root."""
    return BuildEnvSettings.from_cli(
        project_root=project_root,
        toolchain={"hub_root": str(hub_root)},
    )


@pytest.fixture
def chdir_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Run the CLI from inside the temp project."""
    monkeypatch.chdir(project_root)
    yield project_root


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_version_file(project_root: Path, version: str) -> Path:
    """Write a ProjectVersion.txt the way the Unity editor does."""
    path = project_root / "ProjectSettings" / "ProjectVersion.txt"
    path.write_text(
        f"m_EditorVersion: {version}\n"
        f"m_EditorVersionWithRevision: {version} (0123456789ab)\n",
        encoding="utf-8",
    )
    return path


def install_toolchain(hub_root: Path, dirname: str) -> Path:
    """Create ``<hub>/<dirname>`` with the editor binary present."""
    binary = hub_root / dirname / BINARY_RELPATH
    binary.parent.mkdir(parents=True)
    binary.write_text("#!/bin/sh\n", encoding="utf-8")
    return binary


class FakeGenerator:
    """KeyGenerator that writes a placeholder keystore instead of calling keytool."""

    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode
        self.requests: list[CredentialRequest] = []
        self.params: list[KeygenParams] = []

    def generate(self, request: CredentialRequest, params: KeygenParams) -> KeygenOutcome:
        self.requests.append(request)
        self.params.append(params)
        if self.returncode == 0:
            request.keystore_path.write_bytes(b"\xfe\xed\xfe\xed")
            return KeygenOutcome(returncode=0, output="Generating 2,048 bit RSA key pair")
        return KeygenOutcome(returncode=self.returncode, output="keytool error: boom")

    def listing(self, request: CredentialRequest) -> str:
        return "\n".join(f"line {i}" for i in range(40))


class ScriptedPrompter:
    """Prompter that replays scripted answers and records every prompt."""

    def __init__(self, texts: list[str], secrets: list[str], confirms: list[bool]) -> None:
        self.texts = list(texts)
        self.secrets = list(secrets)
        self.confirms = list(confirms)
        self.prompts: list[str] = []
        self.messages: list[str] = []

    def text(self, label: str, default: str) -> str:
        self.prompts.append(label)
        return self.texts.pop(0) if self.texts else ""

    def secret(self, label: str) -> str:
        self.prompts.append(label)
        if not self.secrets:
            raise AssertionError(f"Unexpected secret prompt: {label}")
        return self.secrets.pop(0)

    def confirm(self, label: str) -> bool:
        self.prompts.append(label)
        return self.confirms.pop(0) if self.confirms else False

    def echo(self, message: str = "", *, style: str | None = None) -> None:
        self.messages.append(message)
