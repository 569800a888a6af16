"""Subcommand modules for buildenvctl.

Provides register_commands() which uses deferred imports to keep
``buildenvctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the toolchain group and the standalone commands on the root group."""
    # --- Groups ---
    from buildenvctl.commands.toolchain import toolchain

    cli.add_command(toolchain)

    # --- Standalone commands ---
    from buildenvctl.commands.keystore import keystore
    from buildenvctl.commands.resolve import resolve

    cli.add_command(resolve)
    cli.add_command(keystore)
