"""Tests for domain records."""

from pathlib import Path

import pytest
from pydantic import SecretStr

from buildenvctl.domain.models import (
    CertificateSubject,
    CredentialRequest,
    PersistedCredentialRecord,
    ResolvedConfig,
)
from buildenvctl.domain.types import BuildMode


def _subject(**overrides: str) -> CertificateSubject:
    fields = {
        "common_name": "Jane Doe",
        "org_unit": "Mobile",
        "org": "Acme",
        "locality": "Lisbon",
        "state": "Lisboa",
        "country_code": "PT",
    }
    fields.update(overrides)
    return CertificateSubject(**fields)


class TestCertificateSubject:
    def test_distinguished_name_order(self) -> None:
        assert _subject().distinguished_name == (
            "CN=Jane Doe, OU=Mobile, O=Acme, L=Lisbon, ST=Lisboa, C=PT"
        )


class TestCredentialRequest:
    def test_passwords_hidden_in_repr_and_json(self) -> None:
        request = CredentialRequest(
            keystore_path=Path("/tmp/a.keystore"),
            alias="release",
            keystore_password=SecretStr("hunter22"),
            key_password=SecretStr("swordfish"),
            subject=_subject(),
        )
        assert "hunter22" not in repr(request)
        assert "swordfish" not in request.model_dump_json()


class TestPersistedCredentialRecord:
    def test_entries_use_configured_names(self) -> None:
        request = CredentialRequest(
            keystore_path=Path("/keys/app.keystore"),
            alias="upload",
            keystore_password=SecretStr("store-secret"),
            key_password=SecretStr("key-secret"),
            subject=_subject(),
        )
        record = PersistedCredentialRecord.from_request(request)
        names = {
            "keystore_path": "KS_PATH",
            "keystore_password": "KS_PASS",
            "alias": "KS_ALIAS",
            "key_password": "KEY_PASS",
        }
        assert record.entries(names) == {
            "KS_PATH": "/keys/app.keystore",
            "KS_PASS": "store-secret",
            "KS_ALIAS": "upload",
            "KEY_PASS": "key-secret",
        }


class TestResolvedConfig:
    def test_mode_must_be_enum_value(self) -> None:
        with pytest.raises(Exception):
            ResolvedConfig(mode="staging", project_root=Path("."))  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        cfg = ResolvedConfig(mode=BuildMode.DEV, project_root=Path("."))
        with pytest.raises(Exception):
            cfg.mode = BuildMode.PROD  # type: ignore[misc]
