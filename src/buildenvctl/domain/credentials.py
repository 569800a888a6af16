"""Validation rules for operator-supplied credential fields.

Pure functions; the provisioning flow decides whether a failure is retried
or fatal.
"""

from __future__ import annotations

import re

MIN_PASSWORD_LENGTH = 6

_COUNTRY_CODE_RE = re.compile(r"[A-Za-z]{2}")

_SECRET_MARKERS = ("PASS", "SECRET", "TOKEN")

MASK = "********"


def password_too_short(value: str, min_length: int = MIN_PASSWORD_LENGTH) -> bool:
    """True if *value* is shorter than *min_length* characters."""
    return len(value) < min_length


def is_country_code(value: str) -> bool:
    """True for exactly two ASCII letters (e.g. ``US``, ``de``)."""
    return bool(_COUNTRY_CODE_RE.fullmatch(value))


def is_secret_key(key: str) -> bool:
    """Heuristic: does a settings key name look like it holds a secret?

    Examples:
        >>> is_secret_key("ANDROID_KEYSTORE_PASS")
        True
        >>> is_secret_key("BOARD_DOCTOR_TOKEN")
        True
        >>> is_secret_key("PROJECT_NAME")
        False
    """
    upper = key.upper()
    return any(marker in upper for marker in _SECRET_MARKERS)


def mask_secrets(settings: dict[str, str]) -> dict[str, str]:
    """Return a copy of *settings* with secret-looking values replaced."""
    return {k: (MASK if is_secret_key(k) and v else v) for k, v in settings.items()}
