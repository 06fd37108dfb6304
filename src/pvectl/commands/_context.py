"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides lazy dispatcher initialization and
centralized envelope emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pvectl.output.formatters import format_envelope

if TYPE_CHECKING:
    from pvectl.config.settings import PveSettings
    from pvectl.services.dispatch import Dispatcher
    from pvectl.services.registry import CommandRegistry
    from pvectl.services.result import Envelope


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry and dispatcher are built on first use so ``--help`` and
    ``--version`` never touch the Proxmox connection settings.
    """

    def __init__(self, settings: PveSettings) -> None:
        self.settings = settings
        self._dispatcher: Dispatcher | None = None

        from pvectl.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def registry(self) -> CommandRegistry:
        """The process-wide command registry."""
        from pvectl.services.registry import default_registry

        return default_registry()

    @property
    def dispatcher(self) -> Dispatcher:
        """The dispatcher (created lazily; needs complete API settings)."""
        if self._dispatcher is None:
            from pvectl.config.settings import ConfigurationError
            from pvectl.services.context import build_context
            from pvectl.services.dispatch import Dispatcher

            try:
                context = build_context(self.settings)
            except ConfigurationError as exc:
                raise click.ClickException(str(exc)) from exc
            self._dispatcher = Dispatcher(self.registry, context)
        return self._dispatcher

    def emit(self, envelope: Envelope) -> None:
        """Format and output an envelope with correct exit semantics.

        * Success: writes to stdout, returns normally.
        * Error: writes to stderr, exits with code 1.
        """
        output = format_envelope(envelope, json_output=self.settings.json_output)
        if envelope.is_error:
            click.echo(output, err=True)
            raise SystemExit(1)
        click.echo(output)
