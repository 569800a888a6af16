"""Command: resolve the build environment for a project."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from buildenvctl.commands._base import BenvCommand

if TYPE_CHECKING:
    from buildenvctl.commands._context import AppContext

_RESOLVE_EXAMPLES = """\
  buildenvctl resolve
  buildenvctl resolve prod
  buildenvctl resolve dev --project ~/src/my-game
  buildenvctl --json resolve prod --show-secrets
  buildenvctl -q resolve            # prints only the editor path"""


@click.command("resolve", cls=BenvCommand, examples=_RESOLVE_EXAMPLES)
@click.argument("mode", required=False, default=None, metavar="[dev|prod]")
@click.option(
    "--project",
    "project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: directory of buildenvctl.toml, or CWD).",
)
@click.option("--show-secrets", is_flag=True, help="Do not mask password/token values.")
@click.pass_obj
def resolve(app: AppContext, mode: str | None, project: Path | None, show_secrets: bool) -> None:
    """Resolve mode, toolchain version/path and merged settings."""
    from buildenvctl.domain.credentials import mask_secrets
    from buildenvctl.services.resolve import ResolveService

    result = ResolveService(app.settings).resolve(
        mode, project.resolve() if project else None
    )
    if not result.ok:
        if result.error is not None and "usage" in result.error.detail:
            click.echo(result.error.detail["usage"], err=True)
        app.emit(result)
        return

    if not show_secrets:
        data = dict(result.data)
        data["settings"] = mask_secrets(data.get("settings") or {})
        result = result.model_copy(update={"data": data})
    app.emit(result)
