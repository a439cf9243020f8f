"""Server information command."""

import click

from firereport.cli.error_handling import handle_domain_error
from firereport.domain.errors import FireflyError
from firereport.repository import AboutRepository


@click.command("about")
@click.pass_context
def about(ctx):
    """Test the connection and show the Firefly III server version."""
    client = ctx.obj["client"]

    try:
        info = AboutRepository(client).get_system_info()
    except FireflyError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Connected to {client.config.base_url}")
    click.echo(f"Firefly III version: {info.version}")
    click.echo(f"API version: {info.api_version}")
    if info.php_version:
        click.echo(f"PHP version: {info.php_version}")
    if info.os:
        click.echo(f"Operating system: {info.os}")


def register_commands(cli):
    """Register about command with main CLI."""
    cli.add_command(about)
