"""CLI entrypoint for contractorcli."""

from __future__ import annotations

import logging
import signal
import sys
from pathlib import Path
from typing import Any, Optional

import click

from contractorcli import __version__
from contractorcli.commands.addressblock import addressblock
from contractorcli.commands.blueprint import blueprint
from contractorcli.commands.cartographer import cartographer
from contractorcli.commands.common import CLIState, add_json_options
from contractorcli.commands.complex import complex_group
from contractorcli.commands.foundation import foundation
from contractorcli.commands.job import job
from contractorcli.commands.network import network
from contractorcli.commands.plot import plot
from contractorcli.commands.records import records
from contractorcli.commands.site import site
from contractorcli.commands.structure import structure
from contractorcli.core.config import LoggingConfig
from contractorcli.core.exceptions import ConfigError, ContractorCLIError

logger = logging.getLogger("contractorcli.cli")


def _sigint_handler(signum: int, frame: Any) -> None:
    click.echo("\n")
    click.echo(click.style("Interrupted.", fg="yellow", bold=True), err=True)
    sys.exit(130)


def _setup_logging(state: CLIState) -> None:
    """Apply the configured logging level/format; --verbose forces DEBUG."""
    try:
        logging_config = state.config.logging
    except ConfigError:
        # reported again when the command needs the config
        logging_config = LoggingConfig()

    level = logging.DEBUG if state.verbose else getattr(logging, logging_config.level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=logging_config.format, stream=sys.stderr)


class ContractorGroup(click.Group):
    """Root group: library errors become click errors (message on stderr, exit 1)."""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except ContractorCLIError as exc:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(exc)) from exc


@click.group(cls=ContractorGroup)
@click.option(
    "--config",
    "config_path",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default ~/.contractorcli.ini).",
)
@click.option("--json", "-j", "as_json", is_flag=True, default=False, help="Output as JSON.")
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose (DEBUG) logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], as_json: bool, verbose: bool) -> None:
    """Command line client for the Contractor provisioning server."""
    state = ctx.ensure_object(CLIState)
    if config_path is not None:
        state.config_path = config_path
    state.as_json = state.as_json or as_json
    state.verbose = state.verbose or verbose
    _setup_logging(state)


@cli.command("version")
@click.pass_obj
def version(state: CLIState) -> None:
    """Show the contractorcli version."""
    if state.as_json:
        state.renderer.kv({"version": __version__})
        return
    click.echo(f"contractorcli\n  Version:\t{__version__}")


for _group in (
    site,
    blueprint,
    structure,
    foundation,
    complex_group,
    network,
    addressblock,
    job,
    plot,
    cartographer,
    records,
):
    cli.add_command(_group)

add_json_options(cli)


def main() -> None:
    """Entry point used by `contractorcli` console script."""
    from dotenv import load_dotenv

    load_dotenv(Path.cwd() / ".env")
    signal.signal(signal.SIGINT, _sigint_handler)
    cli()


if __name__ == "__main__":
    main()
