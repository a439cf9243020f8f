"""Report data collection command."""

from pathlib import Path

import click

from firereport.cli.date_filters import resolve_cli_date_range
from firereport.cli.error_handling import handle_domain_error
from firereport.domain.collector import DataCollectorService
from firereport.domain.entities import ReportData, Theme
from firereport.domain.progress import ProgressTracker
from firereport.utils.formatting import format_currency, format_date, get_period

LINE_WIDTH = 72


def _echo_row(label: str, value: str, indent: int = 2) -> None:
    width = LINE_WIDTH - 20 - indent
    click.echo(f"{' ' * indent}{label:<{width}} {value:>20}")


def _display_overview(report: ReportData) -> None:
    overview = report.general_overview
    symbol = overview.currency_symbol or report.currency.symbol
    places = report.currency.decimal_places

    click.echo("\nGeneral Overview:")
    click.echo("-" * LINE_WIDTH)
    _echo_row("Initial balance", format_currency(symbol, overview.initial_balance, places))
    _echo_row("Opening balances", format_currency(symbol, overview.opening_balance, places))
    _echo_row("Income", format_currency(symbol, overview.income, places))
    _echo_row("Expense", format_currency(symbol, overview.expense, places))
    _echo_row("Net flow", format_currency(symbol, overview.net_flow, places))
    _echo_row("Ending balance", format_currency(symbol, overview.ending_balance, places))
    if not overview.reconciles():
        click.echo("  Warning: overview does not reconcile with the transaction ledger")


def _display_accounts(report: ReportData) -> None:
    click.echo("\nAccounts:")
    click.echo("-" * LINE_WIDTH)
    for account in report.accounts:
        symbol = account.currency_symbol
        places = account.currency_decimal_places
        initial = format_currency(symbol, account.initial_balance, places)
        current = format_currency(symbol, account.current_balance, places)
        click.echo(f"  {account.name:<30} {initial:>18} -> {current:>18}")


def _display_insights(title: str, groups) -> None:
    if not groups:
        return
    click.echo(f"\n{title}:")
    click.echo("-" * LINE_WIDTH)
    for group in groups:
        click.echo(f"  By {group.grouping_label}")
        for item in group.items:
            _echo_row(item.name, f"{item.difference:,.2f} {item.currency_code}", indent=4)


@click.command("report")
@click.option("--period", help="Report period: Q1-Q4, H1, H2, 'All Year' or a month name")
@click.option("--year", type=int, help="Report year (defaults to the current year)")
@click.option("--start-date", help="Start date of a custom period (YYYY-MM-DD)")
@click.option("--end-date", help="End date of a custom period (YYYY-MM-DD)")
@click.option("--currency", help="Report currency code (defaults to the first account's currency)")
@click.option("--with-attachments", is_flag=True, help="Download and rasterize attachments")
@click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for downloaded attachments",
)
@click.option(
    "--theme",
    type=click.Choice([theme.value for theme in Theme]),
    default=Theme.LIGHT.value,
    show_default=True,
    help="Report theme",
)
@click.pass_context
def report(
    ctx,
    period: str | None,
    year: int | None,
    start_date: str | None,
    end_date: str | None,
    currency: str | None,
    with_attachments: bool,
    cache_dir: Path | None,
    theme: str,
):
    """Collect report data for a period and print a summary.

    Examples:
        firereport report --period Q1 --year 2023
        firereport report --period March --year 2024 --currency EUR
        firereport report --start-date 2024-01-01 --end-date 2024-02-15 --with-attachments
    """
    client = ctx.obj["client"]
    date_range = resolve_cli_date_range(
        ctx, period=period, year=year, start_date=start_date, end_date=end_date
    )

    collector = DataCollectorService.from_client(
        client, progress=ProgressTracker(), cache_dir=cache_dir
    )
    result = collector.collect(
        date_range,
        theme=Theme(theme),
        with_attachments=with_attachments,
        currency_code=currency,
    )
    if not result.ok:
        handle_domain_error(ctx, result.failure.error)
        return

    data = result.report
    click.echo(f"Financial Report: {get_period(data.date_range)}")
    click.echo(f"Currency: {data.currency.code} ({data.currency.symbol})")
    _display_overview(data)
    _display_accounts(data)
    _display_insights("Income Insights", data.income_insight)
    _display_insights("Expense Insights", data.expense_insight)

    click.echo(f"\nTransactions: {len(data.transaction_journals)} journals")
    if with_attachments:
        click.echo(f"Attachments: {len(data.downloaded_attachments)} downloaded")
    click.echo(
        f"Generated {format_date(data.generated_at.date())} "
        f"from Firefly III {data.system_info.version}"
    )


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)
