"""Allow ``python -m pvectl``."""

from pvectl.cli import cli

cli()
