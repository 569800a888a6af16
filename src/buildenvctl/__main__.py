"""Allow ``python -m buildenvctl``."""

from buildenvctl.cli import cli

cli()
