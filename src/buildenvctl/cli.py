"""Root CLI group for buildenvctl with global flags and command registration."""

from __future__ import annotations

import click

from buildenvctl import __version__
from buildenvctl.commands import register_commands
from buildenvctl.commands._base import BenvGroup
from buildenvctl.commands._context import AppContext
from buildenvctl.config.settings import BuildEnvSettings

_CLI_EXAMPLES = """\
  buildenvctl resolve prod
  buildenvctl toolchain detect
  buildenvctl keystore
  buildenvctl --json -c ci/buildenvctl.toml resolve prod"""


@click.group(cls=BenvGroup, invoke_without_command=True, examples=_CLI_EXAMPLES)
@click.version_option(version=__version__, prog_name="buildenvctl")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """buildenvctl — build environment resolver and keystore provisioning."""
    ctx.ensure_object(dict)
    settings = BuildEnvSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
