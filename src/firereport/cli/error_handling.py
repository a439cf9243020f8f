"""CLI error handling helpers."""

import click

from firereport.domain.errors import DomainError, ErrorKind, ResponseError

_HINTS = {
    401: "Check the personal access token (--token or FIREREPORT_TOKEN).",
    403: "The access token is not allowed to read this data.",
}


def error_hint(error: DomainError | ValueError) -> str | None:
    """Suggest a fix for errors caused by connection settings."""
    if isinstance(error, ResponseError):
        if error.status == 0:
            return "Check that Firefly III is reachable at --host or FIREREPORT_HOST."
        return _HINTS.get(error.status)
    if getattr(error, "kind", None) == ErrorKind.CONFIGURATION:
        return "Pass --host and --token, or set FIREREPORT_HOST and FIREREPORT_TOKEN."
    return None


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error with an optional hint and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    hint = error_hint(error)
    if hint:
        click.echo(f"Hint: {hint}", err=True)
    ctx.exit(1)
