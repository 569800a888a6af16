"""Closed enumerations for build modes, source formats and provisioning states."""

from __future__ import annotations

from enum import StrEnum


class InvalidModeError(ValueError):
    """Raised when a mode argument is not one of the BuildMode values."""

    def __init__(self, value: str) -> None:
        self.value = value
        choices = "|".join(m.value for m in BuildMode)
        super().__init__(f"Invalid environment {value!r}. Must be one of: {choices}")


class BuildMode(StrEnum):
    """Target environment for a build or deploy run."""

    DEV = "dev"
    PROD = "prod"

    @classmethod
    def parse(cls, value: str | None) -> BuildMode:
        """Parse CLI text into a BuildMode. ``None`` means the default (dev).

        Matching is exact: ``"Prod"`` or ``" dev"`` are rejected rather than
        coerced.
        """
        if value is None:
            return cls.DEV
        for member in cls:
            if member.value == value:
                return member
        raise InvalidModeError(value)


class SourceFormat(StrEnum):
    """How a configuration source file is interpreted."""

    ENV = "env"
    SCRIPT = "script"


class ProvisioningState(StrEnum):
    """Linear states of the keystore provisioning flow, in order."""

    COLLECT_PATH = "collect_path"
    COLLECT_ALIAS = "collect_alias"
    COLLECT_PASSWORDS = "collect_passwords"
    COLLECT_SUBJECT = "collect_subject"
    GENERATE = "generate"
