"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from buildenvctl.domain.credentials import MASK
from buildenvctl.output.console import create_console, get_output, style_for_mode

if TYPE_CHECKING:
    from rich.console import Console

    from buildenvctl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich.

    Returns plain text (no ANSI) when Rich detects no terminal,
    which is the case inside Click's CliRunner and piped output.
    """
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode: the one value a script wants."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    key = _QUIET_KEYS.get(result.op)
    if key and result.data.get(key):
        return str(result.data[key])
    return f"OK: {result.op}"


_QUIET_KEYS: dict[str, str] = {
    "resolve": "toolchain_path",
    "detect_version": "version",
    "locate_toolchain": "path",
    "create_keystore": "keystore_path",
}


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    """Print the OK status line."""
    label = Text("OK", style="benv.ok")
    op = Text(f"  {result.op}", style="benv.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="benv.key")
    if value is None:
        v = Text("(not found)", style="benv.warning")
    elif key.endswith("path") or key == "project_root":
        v = Text(str(value), style="benv.path")
    elif key.endswith("version"):
        v = Text(str(value), style="benv.version")
    elif key == "mode":
        v = Text(str(value), style=style_for_mode(str(value)))
    else:
        v = Text(str(value))
    console.print(k, v, sep="", end="")
    console.print()


def _settings_table(settings: dict[str, str]) -> Table:
    """Build a Rich Table of merged settings, sorted by key."""
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Key", style="benv.key", no_wrap=True)
    table.add_column("Value")
    for key in sorted(settings):
        value = settings[key]
        if value == MASK:
            table.add_row(Text(key), Text(value, style="benv.secret"))
        else:
            table.add_row(Text(key), Text(value))
    return table


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="benv.error")
    op = Text(f"  {result.op}", style="benv.op")
    sep = Text(" — ")
    console.print(label, op, sep, Text(msg))

    if verbose and err and err.detail:
        console.print()
        for k, v in err.detail.items():
            console.print(Text(f"  {k}: {v}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_resolve(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in ("mode", "project_root", "toolchain_version", "toolchain_path"):
        _field(console, key, data.get(key))

    loaded = data.get("sources_loaded") or []
    _field(console, "sources", ", ".join(loaded) if loaded else "none")

    settings = data.get("settings") or {}
    if settings and (verbose or len(settings) <= 40):
        console.print()
        console.print(_settings_table(settings))
    elif settings:
        _field(console, "settings", f"{len(settings)} keys (use -v to list)")


def _render_keystore(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in ("keystore_path", "alias", "validity_days"):
        _field(console, key, data.get(key))
    if verbose:
        _field(console, "distinguished_name", data.get("distinguished_name"))
    if data.get("persisted"):
        _field(console, "env_file", data.get("env_file"))
        _field(console, "backup_path", data.get("backup_path"))
        appended = data.get("appended_entries") or []
        if appended:
            _field(console, "appended", ", ".join(appended))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose and result.meta:
        console.print()
        for k, v in result.meta.items():
            console.print(Text(f"    {k}: {v}"))


_OP_RENDERERS: dict[str, Callable[..., None]] = {
    "resolve": _render_resolve,
    "create_keystore": _render_keystore,
}
