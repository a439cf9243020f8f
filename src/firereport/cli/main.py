"""Main CLI entry point."""

import logging

import click

from firereport import __version__
from firereport.api.factories import create_client
from firereport.cli.error_handling import handle_domain_error
from firereport.domain.errors import ConfigurationError

# Import and register all commands at module level
from firereport.cli.commands import about, report


@click.group()
@click.version_option(__version__, prog_name="firereport")
@click.option(
    "--host",
    help="Firefly III address (overrides FIREREPORT_HOST environment variable)",
    envvar="FIREREPORT_HOST",
)
@click.option(
    "--token",
    help="Personal access token (overrides FIREREPORT_TOKEN environment variable)",
    envvar="FIREREPORT_TOKEN",
)
@click.option("--verbose", "-v", is_flag=True, help="Log progress and API requests")
@click.pass_context
def cli(ctx, host: str | None, token: str | None, verbose: bool):
    """Firereport - Firefly III financial report data collector.

    Collects balances, cash flow, insights, transaction journals and
    attachments for a report period from a Firefly III instance.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Connect only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        try:
            client = create_client(host, token, transport=ctx.obj.get("transport"))
        except ConfigurationError as e:
            handle_domain_error(ctx, e)
            return
        ctx.obj["client"] = client
        ctx.call_on_close(client.close)


# Register all commands
about.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
