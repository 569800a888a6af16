"""Tests for the interactive keystore command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from buildenvctl.cli import cli
from buildenvctl.infrastructure import keytool
from tests.conftest import FakeGenerator

SUBJECT_INPUT = "Jane Doe\nMobile\nAcme\nLisbon\nLisboa\nPT\n"


@pytest.fixture
def generator(monkeypatch: pytest.MonkeyPatch) -> FakeGenerator:
    fake = FakeGenerator()
    monkeypatch.setattr(keytool, "KeytoolGenerator", lambda _executable="keytool": fake)
    return fake


def _answers(path: Path, *, alias: str = "release", confirm: str | None = None) -> str:
    text = f"{path}\n{alias}\nstorepass1\nstorepass1\nkeypass1\nkeypass1\n{SUBJECT_INPUT}"
    if confirm is not None:
        text += f"{confirm}\n"
    return text


@pytest.mark.usefixtures("chdir_project")
class TestKeystoreCommand:
    def test_creates_keystore(
        self, cli_runner: CliRunner, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        path = tmp_path / "out" / "app.keystore"
        result = cli_runner.invoke(cli, ["--json", "keystore"], input=_answers(path))
        assert result.exit_code == 0, result.stderr
        payload = json.loads(result.stdout)
        assert payload["data"]["keystore_path"] == str(path)
        assert payload["data"]["persisted"] is False
        assert path.is_file()
        assert "storepass1" not in result.output
        assert "Keystore created successfully!" in result.stderr

    def test_existing_keystore_fails(
        self, cli_runner: CliRunner, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        path = tmp_path / "app.keystore"
        path.write_bytes(b"old")
        result = cli_runner.invoke(cli, ["keystore"], input=f"{path}\n")
        assert result.exit_code == 1
        assert "Keystore already exists" in result.stderr
        assert generator.requests == []

    def test_persists_into_env_file(
        self,
        cli_runner: CliRunner,
        generator: FakeGenerator,
        chdir_project: Path,
        tmp_path: Path,
    ) -> None:
        env_file = chdir_project / "Scripts" / ".env.android.local"
        env_file.write_text("OTHER=1\n", encoding="utf-8")
        path = tmp_path / "app.keystore"

        result = cli_runner.invoke(
            cli, ["--json", "keystore"], input=_answers(path, alias="upload", confirm="y")
        )
        assert result.exit_code == 0, result.stderr
        data = json.loads(result.stdout)["data"]
        assert data["persisted"] is True
        assert Path(data["backup_path"]).read_text(encoding="utf-8") == "OTHER=1\n"
        text = env_file.read_text(encoding="utf-8")
        assert text.startswith("OTHER=1\n")
        assert "export ANDROID_KEY_ALIAS='upload'" in text

    def test_keytool_failure(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        fake = FakeGenerator(returncode=1)
        monkeypatch.setattr(keytool, "KeytoolGenerator", lambda _executable="keytool": fake)
        result = cli_runner.invoke(
            cli, ["keystore"], input=_answers(tmp_path / "app.keystore")
        )
        assert result.exit_code == 1
        assert "Failed to create keystore" in result.stderr

    def test_eof_aborts(
        self, cli_runner: CliRunner, generator: FakeGenerator, tmp_path: Path
    ) -> None:
        path = tmp_path / "app.keystore"
        result = cli_runner.invoke(cli, ["keystore"], input=f"{path}\nrelease\nshort\n")
        assert result.exit_code == 1
        assert "Aborted" in result.output
        assert generator.requests == []
        assert not path.exists()

    def test_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["keystore", "--examples"])
        assert result.exit_code == 0
        assert "buildenvctl keystore" in result.output
