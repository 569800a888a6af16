"""Guarded in-place rewrite of shell env files.

INVARIANT: back up before mutate. ``backup_file`` never overwrites an
existing backup, and ``rewrite_entries`` leaves every line that does not
assign one of the requested keys byte-for-byte intact (including its line
ending).
"""

from __future__ import annotations

import re
import shutil
from pathlib import Path

BACKUP_SUFFIX = ".backup"

_SHELL_ESCAPES = str.maketrans({"\\": "\\\\", '"': '\\"', "$": "\\$", "`": "\\`"})


def quote_value(value: str) -> str:
    r"""Quote *value* for an ``export`` line read back unchanged by bash and the loader.

    Single quotes when the value holds no single quote or backslash;
    otherwise double quotes with backslash, double quote, ``$`` and backtick
    escaped.

    Examples:
        >>> quote_value("pa$word1")
        "'pa$word1'"
        >>> quote_value("it's")
        '"it\'s"'
    """
    if "'" not in value and "\\" not in value:
        return f"'{value}'"
    return f'"{value.translate(_SHELL_ESCAPES)}"'


def backup_path_for(path: Path, stamp: str) -> Path:
    """Pick a backup path that does not exist yet.

    ``<file>.backup`` if free, else ``<file>.<stamp>.backup``.
    """
    plain = path.with_name(path.name + BACKUP_SUFFIX)
    if not plain.exists():
        return plain
    stamped = path.with_name(f"{path.name}.{stamp}{BACKUP_SUFFIX}")
    counter = 1
    while stamped.exists():
        stamped = path.with_name(f"{path.name}.{stamp}-{counter}{BACKUP_SUFFIX}")
        counter += 1
    return stamped


def backup_file(path: Path, stamp: str) -> Path:
    """Copy *path* to a fresh sibling backup and return the backup path."""
    target = backup_path_for(path, stamp)
    shutil.copy2(path, target)
    return target


def _entry_pattern(key: str) -> re.Pattern[str]:
    return re.compile(rf"^(?P<prefix>\s*(?:export\s+)?){re.escape(key)}=")


def rewrite_entries(path: Path, entries: dict[str, str]) -> list[str]:
    """Set each ``KEY`` in *entries* to its value inside *path*.

    Existing ``[export ]KEY=...`` lines are replaced in place; keys with no
    such line are appended as ``export KEY=<quoted value>``. Returns the keys that
    were appended.
    """
    raw = path.read_bytes().decode("utf-8")
    lines = raw.splitlines(keepends=True)
    patterns = {key: _entry_pattern(key) for key in entries}
    seen: set[str] = set()

    for i, line in enumerate(lines):
        for key, pattern in patterns.items():
            match = pattern.match(line)
            if match is None:
                continue
            body = line.rstrip("\r\n")
            ending = line[len(body) :]
            prefix = match.group("prefix") or "export "
            lines[i] = f"{prefix}{key}={quote_value(entries[key])}{ending}"
            seen.add(key)
            break

    appended = [key for key in entries if key not in seen]
    if appended:
        if lines and not lines[-1].endswith(("\n", "\r")):
            lines[-1] += "\n"
        for key in appended:
            lines.append(f"export {key}={quote_value(entries[key])}\n")

    path.write_bytes("".join(lines).encode("utf-8"))
    return appended
