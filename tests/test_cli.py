"""Tests for CLI commands."""

import httpx
import pytest

from fakes import BASE_URL
from firereport.cli.error_handling import error_hint
from firereport.cli.main import cli
from firereport.domain.errors import ServerError, UnexpectedResponseError, ValidationError


@pytest.fixture
def invoke(cli_runner, firefly, monkeypatch):
    monkeypatch.delenv("FIREREPORT_HOST", raising=False)
    monkeypatch.delenv("FIREREPORT_TOKEN", raising=False)

    def run(*args):
        return cli_runner.invoke(
            cli,
            ["--host", BASE_URL, "--token", "secret-token", *args],
            obj={"transport": firefly.transport},
        )

    return run


def test_about(invoke, ledger):
    result = invoke("about")

    assert result.exit_code == 0
    assert f"Connected to {BASE_URL}" in result.output
    assert "Firefly III version: 6.1.0" in result.output
    assert "API version: 2.1.0" in result.output


def test_about_rejected_token(invoke, firefly):
    firefly.route("about", lambda request: httpx.Response(401, text="Unauthenticated."))

    result = invoke("about")

    assert result.exit_code == 1
    assert "Error: Client error 401: Unauthenticated." in result.output
    assert "Hint: Check the personal access token" in result.output


def test_missing_configuration(cli_runner, monkeypatch):
    monkeypatch.delenv("FIREREPORT_HOST", raising=False)
    monkeypatch.delenv("FIREREPORT_TOKEN", raising=False)

    result = cli_runner.invoke(cli, ["about"])

    assert result.exit_code == 1
    assert "host address and access token are required" in result.output
    assert "Hint: Pass --host and --token" in result.output


def test_version(cli_runner):
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "firereport, version 0.1.0" in result.output


def test_configuration_from_environment(cli_runner, firefly, ledger, monkeypatch):
    monkeypatch.setenv("FIREREPORT_HOST", BASE_URL)
    monkeypatch.setenv("FIREREPORT_TOKEN", "env-token")

    result = cli_runner.invoke(cli, ["about"], obj={"transport": firefly.transport})

    assert result.exit_code == 0
    assert firefly.requests[0].headers["Authorization"] == "Bearer env-token"


def test_help_does_not_require_configuration(cli_runner, monkeypatch):
    monkeypatch.delenv("FIREREPORT_HOST", raising=False)

    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "report" in result.output


def test_report(invoke, ledger):
    result = invoke("report", "--period", "Q1", "--year", "2023")

    assert result.exit_code == 0, result.output
    assert "Financial Report: Q1 2023 (1 Jan 2023—31 Mar 2023)" in result.output
    assert "Currency: EUR (€)" in result.output
    assert "€ 1,000.00" in result.output
    assert "€ 3,349.75" in result.output
    assert "Checking" in result.output
    assert "By Category" in result.output
    assert "Transactions: 4 journals" in result.output
    assert "Attachments:" not in result.output
    assert "Firefly III 6.1.0" in result.output


def test_report_with_attachments(invoke, ledger, tmp_path):
    result = invoke(
        "report", "--period", "Q1", "--year", "2023",
        "--with-attachments", "--cache-dir", str(tmp_path), "--theme", "dark",
    )

    assert result.exit_code == 0, result.output
    assert "Attachments: 1 downloaded" in result.output
    assert (tmp_path / "7-receipt.png").exists()


def test_report_custom_dates(invoke, ledger, firefly):
    result = invoke("report", "--start-date", "2023-01-01", "--end-date", "2023-03-31")

    assert result.exit_code == 0, result.output
    assert "Financial Report: Custom 2023" in result.output


def test_report_invalid_currency(invoke, ledger):
    result = invoke("report", "--period", "Q1", "--year", "2023", "--currency", "XYZ")

    assert result.exit_code == 1
    assert "Error: Currency 'XYZ' is not registered or enabled" in result.output


def test_report_illegal_range(invoke, ledger, firefly):
    result = invoke("report", "--start-date", "2023-03-31", "--end-date", "2023-01-01")

    assert result.exit_code == 1
    assert "Error: Invalid date range" in result.output
    assert firefly.requests == []


def test_report_unknown_period(invoke, ledger):
    result = invoke("report", "--period", "Q5", "--year", "2023")

    assert result.exit_code == 1
    assert "Unknown period" in result.output


def test_report_invalid_theme(invoke, ledger):
    result = invoke("report", "--period", "Q1", "--year", "2023", "--theme", "blue")

    assert result.exit_code == 2


@pytest.mark.parametrize("error, expected", [
    (UnexpectedResponseError(0, "Connection refused"), "reachable at --host"),
    (ServerError(500, "Whoops"), None),
    (ValidationError("bad input"), None),
])
def test_error_hint(error, expected):
    hint = error_hint(error)

    if expected is None:
        assert hint is None
    else:
        assert expected in hint
