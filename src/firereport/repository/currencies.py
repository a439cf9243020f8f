"""Currency fetcher."""

from firereport.api.client import FireflyClient
from firereport.api.mappers import currency_to_domain
from firereport.domain.entities import Currency
from firereport.domain.errors import ClientError, InvalidCurrencyCodeError, invalid_currency


class CurrencyRepository:
    def __init__(self, client: FireflyClient):
        self.client = client

    def fetch_currency(self, currency_code: str) -> Currency:
        """Fetch an enabled currency by code.

        Raises:
            InvalidCurrencyCodeError: If the currency does not exist or is disabled
        """
        if not currency_code:
            raise InvalidCurrencyCodeError(invalid_currency(currency_code))

        try:
            document = self.client.request(f"currencies/{currency_code}")
        except ClientError as e:
            if e.status == 404:
                raise InvalidCurrencyCodeError(invalid_currency(currency_code)) from e
            raise

        record = document.get("data") if isinstance(document, dict) else None
        if not isinstance(record, dict) or not record.get("attributes", {}).get("enabled", False):
            raise InvalidCurrencyCodeError(invalid_currency(currency_code))
        return currency_to_domain(record)
