"""Click base classes that give every buildenvctl command an ``--examples`` flag.

``--help`` stays short and ends with a one-line pointer to ``--examples``.
``--examples`` prints shell lines an operator can paste as-is (resolving a
project, chaining ``toolchain detect`` into ``toolchain locate``, running
the keystore wizard) and exits without loading any project files.

A subcommand registered on a :class:`BenvGroup` without examples of its
own shows the group's example lines that invoke it.
"""

from __future__ import annotations

import textwrap
from typing import Any

import click


def _show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    examples = getattr(ctx.command, "examples", None) or ""
    click.echo(f"Examples for '{ctx.command_path}':\n")
    click.echo(textwrap.indent(examples, "  "))
    ctx.exit(0)


class _ExamplesMixin:
    """Shared ``--examples`` option and help epilog hint."""

    examples: str | None

    def _init_examples(self, examples: str | None) -> None:
        self.examples = textwrap.dedent(examples).strip("\n") if examples else None
        if self.examples:
            self._attach_examples_option()

    def _attach_examples_option(self) -> None:
        params: list[click.Parameter] = self.params  # type: ignore[attr-defined]
        if any(p.name == "examples" for p in params):
            return
        params.append(
            click.Option(
                ["--examples"],
                is_flag=True,
                expose_value=False,
                is_eager=True,
                callback=_show_examples,
                help="Show usage examples and exit.",
            )
        )

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"Run '{ctx.command_path} --examples' for usage examples.")


class BenvCommand(_ExamplesMixin, click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)


class BenvGroup(_ExamplesMixin, click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = BenvCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = BenvCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._init_examples(examples)

    def add_command(self, cmd: click.Command, name: str | None = None) -> None:
        """Register *cmd*, lending it this group's matching example lines."""
        super().add_command(cmd, name)
        if not isinstance(cmd, BenvCommand) or cmd.examples or not self.examples:
            return
        invocation = f"{self.name} {name or cmd.name}"
        lines = [line for line in self.examples.splitlines() if invocation in line]
        if lines:
            cmd._init_examples("\n".join(lines))
