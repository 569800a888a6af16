"""Configuration source loading and merging.

INVARIANT: An absent source is never an error. ``load_source`` returns
``found=False`` with an empty mapping and logs a warning; the caller decides
what the absence means.

Values are returned, never exported into ``os.environ``. Sources are read the
way a shell would ``source`` them one after another: a ``${VAR}`` reference
sees keys assigned earlier in the same file, keys from earlier sources, and
then the process environment. Single-quoted values are taken literally;
``\\$`` and ``\\``` in double-quoted or bare values stay literal characters.
Line syntax (quotes, ``export`` prefix, escapes) is left to python-dotenv's
parser.
"""

from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable, Mapping
from io import StringIO
from pathlib import Path

from dotenv.parser import parse_stream
from dotenv.variables import Variable, parse_variables

from buildenvctl.domain.models import ConfigSource, LoadedSource
from buildenvctl.domain.types import SourceFormat

logger = logging.getLogger(__name__)

# Top-level shell assignment: optional ``export``, identifier, ``=``.
_ASSIGNMENT_RE = re.compile(r"^(?:export\s+)?[A-Za-z_][A-Za-z0-9_]*=")

# Opening quote of the value part of a binding, if any.
_VALUE_QUOTE_RE = re.compile(
    r"""^\s*(?:export\s+)?(?:'[^']+'|[^=#\s]+)=[^\S\r\n]*(?P<quote>['"]?)"""
)

_ESCAPED_CHAR_RE = re.compile(r"\\([$`])")


def _strip_noise(lines: Iterable[str]) -> list[str]:
    """Drop comment lines and blank lines."""
    kept: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        kept.append(line)
    return kept


def _script_assignments(lines: Iterable[str], path: Path) -> list[str]:
    """Keep only unindented assignment lines from a shell script."""
    kept: list[str] = []
    for line in lines:
        if _ASSIGNMENT_RE.match(line):
            kept.append(line)
        else:
            logger.debug("Ignoring non-assignment line in %s: %s", path, line.strip())
    return kept


def _interpolate(text: str, env: Mapping[str, str], key: str, path: Path) -> str:
    parts: list[str] = []
    for atom in parse_variables(text):
        if isinstance(atom, Variable) and atom.name not in env and atom.default is None:
            logger.warning("%s in %s references undefined ${%s}", key, path, atom.name)
        parts.append(atom.resolve(env))
    return "".join(parts)


def expand_value(
    value: str,
    env: Mapping[str, str],
    *,
    key: str = "",
    path: Path | None = None,
) -> str:
    """Expand ``${VAR}`` and ``${VAR:-default}`` in *value* against *env*.

    ``\\$`` and ``\\``` are unescaped to the literal character and never
    start an expansion.

    Examples:
        >>> expand_value("${BASE}/build", {"BASE": "/opt/game"})
        '/opt/game/build'
        >>> expand_value("pa\\\\${HOME}x", {"HOME": "/root"})
        'pa${HOME}x'
    """
    where = path or Path("<text>")
    parts: list[str] = []
    cursor = 0
    for match in _ESCAPED_CHAR_RE.finditer(value):
        parts.append(_interpolate(value[cursor : match.start()], env, key, where))
        parts.append(match.group(1))
        cursor = match.end()
    parts.append(_interpolate(value[cursor:], env, key, where))
    return "".join(parts)


def parse_assignments(
    text: str,
    fmt: SourceFormat = SourceFormat.ENV,
    *,
    path: Path | None = None,
    context: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Parse *text* into a ``{key: value}`` mapping.

    *context* holds the values visible to ``${VAR}`` before the first line.
    Keys declared without a value (``FOO`` on its own line) are skipped.
    """
    where = path or Path("<script>" if fmt is SourceFormat.SCRIPT else "<env>")
    lines = _strip_noise(text.splitlines())
    if fmt is SourceFormat.SCRIPT:
        lines = _script_assignments(lines, where)
    if not lines:
        return {}

    env: dict[str, str] = dict(context or {})
    values: dict[str, str] = {}
    for binding in parse_stream(StringIO("\n".join(lines) + "\n")):
        if binding.error:
            logger.warning("Unparseable line in %s: %s", where, binding.original.string.strip())
            continue
        if binding.key is None or binding.value is None:
            continue
        quote = _VALUE_QUOTE_RE.match(binding.original.string)
        if quote is not None and quote.group("quote") == "'":
            value = binding.value
        else:
            value = expand_value(binding.value, env, key=binding.key, path=where)
        values[binding.key] = value
        env[binding.key] = value
    return values


def load_source(source: ConfigSource, context: Mapping[str, str] | None = None) -> LoadedSource:
    """Read one configuration source. Never raises for a missing file."""
    if not source.path.is_file():
        logger.warning("%s not found at %s", source.name, source.path)
        return LoadedSource(source=source, found=False)

    text = source.path.read_text(encoding="utf-8")
    values = parse_assignments(text, source.format, path=source.path, context=context)
    logger.debug("Loaded %d keys from %s (%s)", len(values), source.name, source.path)
    return LoadedSource(source=source, found=True, values=values)


def load_sources(sources: Iterable[ConfigSource]) -> list[LoadedSource]:
    """Load *sources* in order; each one sees the values merged before it."""
    loaded: list[LoadedSource] = []
    merged: dict[str, str] = {}
    for source in sources:
        item = load_source(source, context={**os.environ, **merged})
        merged.update(item.values)
        loaded.append(item)
    return loaded


def merge_sources(loaded: Iterable[LoadedSource]) -> dict[str, str]:
    """Merge sources left to right. A later source's keys overwrite earlier ones."""
    merged: dict[str, str] = {}
    for item in loaded:
        merged.update(item.values)
    return merged
