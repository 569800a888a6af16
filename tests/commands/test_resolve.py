"""Tests for the resolve command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from buildenvctl.cli import cli
from buildenvctl.domain.credentials import MASK
from tests.conftest import install_toolchain, write_version_file


@pytest.fixture
def configured_project(chdir_project: Path, hub_root: Path) -> Path:
    """Project with a buildenvctl.toml pointing at the temp hub root."""
    (chdir_project / "buildenvctl.toml").write_text(
        f'[toolchain]\nhub_root = "{hub_root}"\n', encoding="utf-8"
    )
    return chdir_project


def _snapshot(root: Path) -> dict[str, bytes | None]:
    """Every path under *root* with its bytes (None for directories)."""
    return {
        str(p.relative_to(root)): (p.read_bytes() if p.is_file() else None)
        for p in sorted(root.rglob("*"))
    }


@pytest.mark.usefixtures("configured_project")
class TestResolveCommand:
    def test_invalid_mode_exits_with_usage(
        self, cli_runner: CliRunner, configured_project: Path
    ) -> None:
        write_version_file(configured_project, "2022.3.5f1")
        (configured_project / "Scripts" / ".env").write_text("A=1\n", encoding="utf-8")
        (configured_project / "project-config.sh").write_text("export B=2\n", encoding="utf-8")
        before = _snapshot(configured_project)

        result = cli_runner.invoke(cli, ["resolve", "staging"])
        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Usage: buildenvctl resolve [dev|prod]" in result.stderr
        assert "Invalid environment 'staging'" in result.stderr
        assert _snapshot(configured_project) == before

    def test_end_to_end(
        self, cli_runner: CliRunner, configured_project: Path, hub_root: Path
    ) -> None:
        write_version_file(configured_project, "2022.3.5f1")
        binary = install_toolchain(hub_root, "2022.3.5f1")
        (configured_project / "Scripts" / ".env").write_text(
            "PROJECT_NAME=Game\nANDROID_KEYSTORE_PASS=hunter22\n", encoding="utf-8"
        )

        result = cli_runner.invoke(cli, ["--json", "resolve", "prod"])
        assert result.exit_code == 0, result.stderr
        payload = json.loads(result.stdout)
        data = payload["data"]
        assert payload["ok"] is True
        assert data["mode"] == "prod"
        assert data["toolchain_version"] == "2022.3.5f1"
        assert data["toolchain_path"] == str(binary)
        assert data["settings"]["PROJECT_NAME"] == "Game"
        assert data["settings"]["ANDROID_KEYSTORE_PASS"] == MASK

    def test_show_secrets(self, cli_runner: CliRunner, configured_project: Path) -> None:
        (configured_project / "Scripts" / ".env").write_text(
            "ANDROID_KEYSTORE_PASS=hunter22\n", encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["--json", "resolve", "--show-secrets"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["settings"]["ANDROID_KEYSTORE_PASS"] == "hunter22"

    def test_human_output_masks_secrets(
        self, cli_runner: CliRunner, configured_project: Path
    ) -> None:
        (configured_project / "Scripts" / ".env").write_text(
            "ANDROID_KEYSTORE_PASS=hunter22\n", encoding="utf-8"
        )
        result = cli_runner.invoke(cli, ["resolve"])
        assert result.exit_code == 0
        assert "hunter22" not in result.output
        assert "OK" in result.stdout
        assert "dev" in result.stdout

    def test_warnings_go_to_stderr(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["resolve", "dev"])
        assert result.exit_code == 0
        assert "WARNING: Could not detect toolchain version" in result.stderr
        assert "WARNING" not in result.stdout

    def test_quiet_prints_toolchain_path(
        self, cli_runner: CliRunner, configured_project: Path, hub_root: Path
    ) -> None:
        write_version_file(configured_project, "2022.3.5")
        binary = install_toolchain(hub_root, "2022.3.5f1")
        result = cli_runner.invoke(cli, ["-q", "resolve"])
        assert result.exit_code == 0
        assert result.stdout.strip() == str(binary)

    def test_project_option(
        self, cli_runner: CliRunner, tmp_path: Path
    ) -> None:
        other = tmp_path / "elsewhere"
        (other / "ProjectSettings").mkdir(parents=True)
        write_version_file(other, "6000.0.1f1")
        result = cli_runner.invoke(cli, ["--json", "resolve", "--project", str(other)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["toolchain_version"] == "6000.0.1f1"
