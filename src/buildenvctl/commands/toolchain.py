"""Command group: toolchain version detection and installation lookup."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from buildenvctl.commands._base import BenvGroup

if TYPE_CHECKING:
    from buildenvctl.commands._context import AppContext


@click.group(
    cls=BenvGroup,
    examples="""\
  buildenvctl toolchain detect
  buildenvctl toolchain detect --project ~/src/my-game
  buildenvctl toolchain locate 2022.3.5
  buildenvctl -q toolchain locate $(buildenvctl -q toolchain detect)""",
)
def toolchain() -> None:
    """Inspect the project's toolchain version and installation."""


@toolchain.command()
@click.option(
    "--project",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Project root (default: directory of buildenvctl.toml, or CWD).",
)
@click.pass_obj
def detect(app: AppContext, project: Path | None) -> None:
    """Print the version recorded in the project metadata file."""
    from buildenvctl.services.resolve import ResolveService

    app.emit(ResolveService(app.settings).detect(project.resolve() if project else None))


@toolchain.command()
@click.argument("version", default="")
@click.pass_obj
def locate(app: AppContext, version: str) -> None:
    """Find the installed editor binary for VERSION."""
    from buildenvctl.services.resolve import ResolveService

    app.emit(ResolveService(app.settings).locate(version))
