"""The external key-generation capability: the JDK ``keytool`` binary.

buildenvctl performs no cryptography itself. It assembles parameters, runs
``keytool -genkeypair`` and trusts the result. Passwords are handed over
through the child's environment (``-storepass:env``) so they never show up
in the process table.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from buildenvctl.domain.models import CredentialRequest

logger = logging.getLogger(__name__)

_STOREPASS_ENV = "BUILDENVCTL_STOREPASS"
_KEYPASS_ENV = "BUILDENVCTL_KEYPASS"


class KeytoolNotFoundError(RuntimeError):
    """Raised when the keytool binary is not on PATH."""


@dataclass(frozen=True)
class KeygenParams:
    """Non-secret generation parameters shared by every request."""

    key_algorithm: str = "RSA"
    key_size: int = 2048
    validity_days: int = 10000


@dataclass(frozen=True)
class KeygenOutcome:
    """Completion status of one keytool invocation."""

    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class KeyGenerator(Protocol):
    """Anything that can create a keystore from a CredentialRequest."""

    def generate(self, request: CredentialRequest, params: KeygenParams) -> KeygenOutcome: ...

    def listing(self, request: CredentialRequest) -> str: ...


def genkeypair_args(request: CredentialRequest, params: KeygenParams) -> list[str]:
    """Build the ``keytool -genkeypair`` argument list (without the binary)."""
    return [
        "-genkeypair",
        "-v",
        "-keystore",
        str(request.keystore_path),
        "-alias",
        request.alias,
        "-keyalg",
        params.key_algorithm,
        "-keysize",
        str(params.key_size),
        "-validity",
        str(params.validity_days),
        "-storepass:env",
        _STOREPASS_ENV,
        "-keypass:env",
        _KEYPASS_ENV,
        "-dname",
        request.subject.distinguished_name,
    ]


class KeytoolGenerator:
    """KeyGenerator backed by the ``keytool`` executable."""

    def __init__(self, executable: str = "keytool") -> None:
        self._executable = executable

    def _resolve(self) -> str:
        found = shutil.which(self._executable)
        if found is None:
            msg = f"{self._executable} not found on PATH (install a JDK)"
            raise KeytoolNotFoundError(msg)
        return found

    def _run(
        self, args: list[str], request: CredentialRequest
    ) -> subprocess.CompletedProcess[str]:
        env = dict(os.environ)
        env[_STOREPASS_ENV] = request.keystore_password.get_secret_value()
        env[_KEYPASS_ENV] = request.key_password.get_secret_value()
        return subprocess.run(
            [self._resolve(), *args],
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )

    def generate(self, request: CredentialRequest, params: KeygenParams) -> KeygenOutcome:
        """Run ``keytool -genkeypair``. Raises KeytoolNotFoundError if absent."""
        proc = self._run(genkeypair_args(request, params), request)
        output = (proc.stdout or "") + (proc.stderr or "")
        logger.debug("keytool -genkeypair exited with %d", proc.returncode)
        return KeygenOutcome(returncode=proc.returncode, output=output)

    def listing(self, request: CredentialRequest) -> str:
        """Return the ``keytool -list -v`` output for the new keystore."""
        args = [
            "-list",
            "-v",
            "-keystore",
            str(request.keystore_path),
            "-storepass:env",
            _STOREPASS_ENV,
        ]
        proc = self._run(args, request)
        if proc.returncode != 0:
            logger.warning("keytool -list failed for %s", request.keystore_path)
        return proc.stdout or proc.stderr or ""


def head(text: str, lines: int) -> str:
    """First *lines* lines of *text*."""
    return "\n".join(text.splitlines()[:lines])


def ensure_parent(path: Path) -> None:
    """Create the keystore's parent directory if needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
