"""ProvisioningFlow — guided creation of an Android signing keystore.

States, in order, none skipped and none revisited:

  COLLECT_PATH → COLLECT_ALIAS → COLLECT_PASSWORDS → COLLECT_SUBJECT → GENERATE

followed by optional persistence of four entries into the project's env
file. Only password entry retries; every other failure ends the flow with
an ``ok=False`` result. There is no resume: a re-run starts at COLLECT_PATH.

Operator I/O goes through a :class:`Prompter` so the flow runs the same under
click, CliRunner, or a scripted fake.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import structlog
from pydantic import SecretStr

from buildenvctl.domain.credentials import MASK, is_country_code, password_too_short
from buildenvctl.domain.models import (
    CertificateSubject,
    CredentialRequest,
    PersistedCredentialRecord,
)
from buildenvctl.domain.types import ProvisioningState
from buildenvctl.infrastructure.envfile import backup_file, quote_value, rewrite_entries
from buildenvctl.infrastructure.keytool import (
    KeyGenerator,
    KeygenParams,
    KeytoolNotFoundError,
    ensure_parent,
    head,
)
from buildenvctl.services._helpers import now_compact, now_iso
from buildenvctl.services.base import BaseService
from buildenvctl.services.result import ServiceResult

if TYPE_CHECKING:
    from buildenvctl.config.settings import BuildEnvSettings

log = structlog.get_logger(__name__)

OP = "create_keystore"


class Prompter(Protocol):
    """Interactive operator I/O used by the flow."""

    def text(self, label: str, default: str) -> str: ...

    def secret(self, label: str) -> str: ...

    def confirm(self, label: str) -> bool: ...

    def echo(self, message: str = "", *, style: str | None = None) -> None: ...


class ProvisioningFlow(BaseService):
    """Linear, retry-on-password-only state machine producing a keystore."""

    def __init__(
        self,
        settings: BuildEnvSettings,
        prompter: Prompter,
        generator: KeyGenerator,
    ) -> None:
        super().__init__(settings)
        self._prompter = prompter
        self._generator = generator
        self.state: ProvisioningState = ProvisioningState.COLLECT_PATH
        self._warnings: list[str] = []
        self._keystore_path: Path | None = None
        self._alias = ""
        self._keystore_password = ""
        self._key_password = ""
        self._subject: CertificateSubject | None = None

    @property
    def env_file(self) -> Path:
        """The env file offered for persistence."""
        return self._project_path(self._settings.keystore.env_file)

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------

    def run(self) -> ServiceResult:
        """Walk every state in order, stopping at the first fatal failure."""
        steps = {
            ProvisioningState.COLLECT_PATH: self._collect_path,
            ProvisioningState.COLLECT_ALIAS: self._collect_alias,
            ProvisioningState.COLLECT_PASSWORDS: self._collect_passwords,
            ProvisioningState.COLLECT_SUBJECT: self._collect_subject,
        }
        for state, step in steps.items():
            self.state = state
            log.debug("provisioning_state", state=state.value)
            failure = step()
            if failure is not None:
                return failure

        self.state = ProvisioningState.GENERATE
        log.debug("provisioning_state", state=self.state.value)
        return self._generate()

    # ------------------------------------------------------------------
    # States
    # ------------------------------------------------------------------

    def _collect_path(self) -> ServiceResult | None:
        ks = self._settings.keystore
        self._prompter.echo("Step 1: Keystore Location", style="step")
        raw = self._prompter.text("Keystore path", ks.default_path)
        path = Path(raw or ks.default_path).expanduser()
        if path.exists():
            return ServiceResult.failure(
                OP,
                "KEYSTORE_EXISTS",
                f"Keystore already exists at: {path}. "
                "Delete the old one first or choose a different path.",
                detail={"keystore_path": str(path)},
            )
        self._keystore_path = path
        return None

    def _collect_alias(self) -> ServiceResult | None:
        ks = self._settings.keystore
        self._prompter.echo("Step 2: Key Alias", style="step")
        raw = self._prompter.text("Alias name", ks.default_alias)
        self._alias = raw.strip() or ks.default_alias
        return None

    def _collect_passwords(self) -> ServiceResult | None:
        self._prompter.echo("Step 3: Passwords", style="step")
        self._prompter.echo("Save these passwords somewhere safe; every release build needs them.")
        store = self._collect_secret("keystore password")
        if store is None:
            return self._attempts_exhausted("keystore password")
        self._keystore_password = store

        self._prompter.echo("Now set the key password (can be the same as keystore password)")
        key = self._collect_secret("key password")
        if key is None:
            return self._attempts_exhausted("key password")
        self._key_password = key
        return None

    def _collect_secret(self, label: str) -> str | None:
        """Prompt → length check → confirm; mismatch restarts from the prompt.

        Returns None once ``max_password_attempts`` passes have failed
        (0 means no limit).
        """
        ks = self._settings.keystore
        minimum = ks.min_password_length
        limit = ks.max_password_attempts
        attempts = 0
        while limit <= 0 or attempts < limit:
            attempts += 1
            value = self._prompter.secret(f"Enter {label} (min {minimum} characters)")
            if password_too_short(value, minimum):
                self._prompter.echo(
                    f"Password must be at least {minimum} characters", style="error"
                )
                continue
            confirmation = self._prompter.secret(f"Confirm {label}")
            if confirmation != value:
                self._prompter.echo("Passwords don't match. Try again.", style="error")
                continue
            return value
        return None

    def _attempts_exhausted(self, label: str) -> ServiceResult:
        limit = self._settings.keystore.max_password_attempts
        return ServiceResult.failure(
            OP,
            "PASSWORD_ATTEMPTS_EXHAUSTED",
            f"No valid {label} after {limit} attempts",
            detail={"attempts": limit},
        )

    def _collect_subject(self) -> ServiceResult | None:
        defaults = self._settings.keystore.subject
        self._prompter.echo("Step 4: Certificate Information", style="step")
        ask = self._prompter.text
        subject = CertificateSubject(
            common_name=ask("First and Last Name", defaults.common_name) or defaults.common_name,
            org_unit=ask("Organization Unit", defaults.org_unit) or defaults.org_unit,
            org=ask("Organization", defaults.org) or defaults.org,
            locality=ask("City or Locality", defaults.locality) or defaults.locality,
            state=ask("State or Province", defaults.state) or defaults.state,
            country_code=ask("Country Code (2 letters)", defaults.country_code)
            or defaults.country_code,
        )
        # Not enforced; the certificate is still generated.
        if not is_country_code(subject.country_code):
            self._warnings.append(f"Country code {subject.country_code!r} is not two letters")
        self._subject = subject
        return None

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def _request(self) -> CredentialRequest:
        if self._keystore_path is None or self._subject is None:
            msg = f"Cannot generate from state {self.state.value}: path or subject not collected"
            raise RuntimeError(msg)
        return CredentialRequest(
            keystore_path=self._keystore_path,
            alias=self._alias,
            keystore_password=SecretStr(self._keystore_password),
            key_password=SecretStr(self._key_password),
            subject=self._subject,
        )

    def _generate(self) -> ServiceResult:
        ks = self._settings.keystore
        request = self._request()
        params = KeygenParams(
            key_algorithm=ks.key_algorithm,
            key_size=ks.key_size,
            validity_days=ks.validity_days,
        )
        self._prompter.echo("Generating keystore...", style="step")

        try:
            ensure_parent(request.keystore_path)
            outcome = self._generator.generate(request, params)
        except KeytoolNotFoundError as exc:
            return ServiceResult.failure(OP, "KEYTOOL_MISSING", str(exc))
        except OSError as exc:
            return ServiceResult.failure(OP, "KEYGEN_FAILED", f"Failed to create keystore: {exc}")

        if not outcome.ok:
            log.warning("keygen_failed", returncode=outcome.returncode)
            return ServiceResult.failure(
                OP,
                "KEYGEN_FAILED",
                f"Failed to create keystore (keytool exited with {outcome.returncode})",
                detail={"returncode": outcome.returncode, "output": head(outcome.output, 20)},
            )

        self._prompter.echo("Keystore created successfully!", style="ok")
        self._prompter.echo("Verifying keystore...", style="step")
        self._prompter.echo(head(self._generator.listing(request), ks.listing_lines))
        self._show_next_steps(request)

        data: dict[str, object] = {
            "keystore_path": str(request.keystore_path),
            "alias": request.alias,
            "validity_days": ks.validity_days,
            "distinguished_name": request.subject.distinguished_name,
            "created_at": now_iso(),
            "persisted": False,
        }
        return self._persist(request, data)

    def _show_next_steps(self, request: CredentialRequest) -> None:
        names = self._settings.keystore.entries
        self._prompter.echo("Next steps: add these entries to your env file", style="step")
        keystore_path = quote_value(str(request.keystore_path))
        self._prompter.echo(f"export {names.keystore_path}={keystore_path}")
        self._prompter.echo(f"export {names.keystore_password}={quote_value(MASK)}")
        self._prompter.echo(f"export {names.alias}={quote_value(request.alias)}")
        self._prompter.echo(f"export {names.key_password}={quote_value(MASK)}")
        self._prompter.echo("Back up the keystore and passwords. A lost key cannot be reissued.")

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _persist(self, request: CredentialRequest, data: dict[str, object]) -> ServiceResult:
        """Offer to write the four entries into the env file, backing it up first."""
        env_file = self.env_file
        if not env_file.is_file():
            log.debug("persist_skipped", env_file=str(env_file))
            return ServiceResult(ok=True, op=OP, data=data, warnings=self._warnings)

        if not self._prompter.confirm(f"Do you want to automatically update {env_file}?"):
            return ServiceResult(ok=True, op=OP, data=data, warnings=self._warnings)

        record = PersistedCredentialRecord.from_request(request)
        entries = record.entries(self._settings.keystore.entries.model_dump())
        try:
            backup = backup_file(env_file, now_compact())
            self._prompter.echo(f"Backup created: {backup}")
            appended = rewrite_entries(env_file, entries)
        except OSError as exc:
            return ServiceResult.failure(
                OP,
                "PERSIST_FAILED",
                f"Failed to update {env_file}: {exc}",
                detail={"keystore_path": str(request.keystore_path)},
                warnings=self._warnings,
            )

        self._prompter.echo(f"Updated {env_file}", style="ok")
        data.update(
            {
                "persisted": True,
                "env_file": str(env_file),
                "backup_path": str(backup),
                "appended_entries": appended,
            }
        )
        return ServiceResult(ok=True, op=OP, data=data, warnings=self._warnings)
