"""Command: interactive Android signing keystore creation."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from buildenvctl.commands._base import BenvCommand

if TYPE_CHECKING:
    from buildenvctl.commands._context import AppContext

_KEYSTORE_EXAMPLES = """\
  buildenvctl keystore
  buildenvctl --json keystore
  BUILDENVCTL_KEYSTORE__ENV_FILE=Scripts/.env.release buildenvctl keystore"""

_STYLES: dict[str, dict[str, object]] = {
    "step": {"fg": "blue", "bold": True},
    "ok": {"fg": "green", "bold": True},
    "error": {"fg": "red"},
}


class ClickPrompter:
    """Prompter backed by click prompts on stderr. Ctrl-C or EOF aborts the flow."""

    def text(self, label: str, default: str) -> str:
        return str(click.prompt(label, default=default, show_default=True, err=True))

    def secret(self, label: str) -> str:
        value = click.prompt(label, default="", hide_input=True, show_default=False, err=True)
        return str(value)

    def confirm(self, label: str) -> bool:
        return click.confirm(label, default=False, err=True)

    def echo(self, message: str = "", *, style: str | None = None) -> None:
        if style == "step":
            click.echo(err=True)
        click.secho(message, err=True, **_STYLES.get(style or "", {}))  # type: ignore[arg-type]


@click.command("keystore", cls=BenvCommand, examples=_KEYSTORE_EXAMPLES)
@click.pass_obj
def keystore(app: AppContext) -> None:
    """Create a new signing keystore through guided prompts."""
    from buildenvctl.infrastructure.keytool import KeytoolGenerator
    from buildenvctl.services.provisioning import ProvisioningFlow

    flow = ProvisioningFlow(
        app.settings,
        prompter=ClickPrompter(),
        generator=KeytoolGenerator(app.settings.keystore.keytool),
    )
    app.emit(flow.run())
