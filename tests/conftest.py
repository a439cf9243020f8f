"""Shared pytest fixtures for firereport tests."""

from datetime import date

import pytest

from fakes import BASE_URL, FakeFirefly, FakeLedger
from firereport.api.client import ConnectionConfig, FireflyClient
from firereport.domain.cancellation import CancellationToken
from firereport.domain.entities import DateRangeBoundaries


@pytest.fixture
def firefly():
    """Create an empty fake Firefly III server."""
    return FakeFirefly()


@pytest.fixture
def cancel_token():
    return CancellationToken()


@pytest.fixture
def client(firefly, cancel_token):
    """Create a client talking to the fake server."""
    config = ConnectionConfig(base_url=BASE_URL + "/", token="secret-token")
    client = FireflyClient(config, transport=firefly.transport, cancel_token=cancel_token)

    yield client

    client.close()


@pytest.fixture
def ledger(firefly):
    """Install a consistent Q1 2023 book on the fake server."""
    ledger = FakeLedger()
    ledger.install(firefly)
    return ledger


@pytest.fixture
def q1_2023():
    return DateRangeBoundaries(
        start_date=date(2023, 1, 1), end_date=date(2023, 3, 31), period="Q1", year=2023
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
