"""Fake Firefly III server and API record builders for tests."""

import io
import math
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional, Union

import httpx
from PIL import Image

BASE_URL = "https://firefly.test"
API_ROOT = "/api/v1/"

Handler = Union[Callable[[httpx.Request], Any], dict, list]


def png_bytes(size=(4, 4), color="red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def paginate(request: httpx.Request, items: list, per_page: int) -> dict:
    """Return one page of items with Firefly pagination metadata."""
    page = int(request.url.params.get("page", 1))
    total_pages = max(1, math.ceil(len(items) / per_page))
    chunk = items[(page - 1) * per_page : page * per_page]
    return {
        "data": chunk,
        "meta": {
            "pagination": {
                "total": len(items),
                "count": len(chunk),
                "per_page": per_page,
                "current_page": page,
                "total_pages": total_pages,
            }
        },
    }


class FakeFirefly:
    """In-memory Firefly III API served through httpx.MockTransport.

    Routes map API paths (below /api/v1/) to a JSON document or to a
    callable receiving the request. Unknown paths answer 404.
    """

    def __init__(self):
        self.routes: dict[str, Handler] = {}
        self.requests: list[httpx.Request] = []

    def route(self, path: str, handler: Handler) -> None:
        self.routes[path] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_ROOT):
            path = path[len(API_ROOT):]

        handler = self.routes.get(path)
        if handler is None:
            return httpx.Response(404, json={"message": "Resource not found"})

        result = handler(request) if callable(handler) else handler
        if isinstance(result, httpx.Response):
            return result
        return httpx.Response(200, json=result)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def requests_for(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == API_ROOT + path]


def account_record(
    account_id: str,
    name: str,
    balance: Union[str, Decimal] = "0",
    *,
    account_type: str = "asset",
    currency_code: str = "EUR",
    currency_symbol: str = "€",
    opening_balance: Optional[str] = None,
    opening_balance_date: Optional[str] = "2020-01-01T00:00:00+00:00",
) -> dict:
    return {
        "type": "accounts",
        "id": account_id,
        "attributes": {
            "name": name,
            "type": account_type,
            "currency_code": currency_code,
            "currency_symbol": currency_symbol,
            "currency_decimal_places": 2,
            "current_balance": str(balance),
            "current_balance_date": "2023-03-31T23:59:59+00:00",
            "opening_balance": opening_balance,
            "opening_balance_date": opening_balance_date,
        },
    }


def split(
    journal_id: str,
    journal_type: str,
    amount: str,
    when: str,
    source_id: str,
    destination_id: str,
    *,
    description: str = "",
    currency_code: str = "EUR",
    has_attachments: bool = False,
    foreign_currency_code: Optional[str] = None,
    foreign_amount: Optional[str] = None,
) -> dict:
    return {
        "transaction_journal_id": journal_id,
        "type": journal_type,
        "date": when,
        "order": 0,
        "amount": amount,
        "description": description or f"Journal {journal_id}",
        "currency_code": currency_code,
        "currency_symbol": "€",
        "currency_decimal_places": 2,
        "source_id": source_id,
        "source_name": f"Account {source_id}",
        "source_type": "Asset account",
        "destination_id": destination_id,
        "destination_name": f"Account {destination_id}",
        "destination_type": "Asset account",
        "tags": [],
        "has_attachments": has_attachments,
        "foreign_currency_code": foreign_currency_code,
        "foreign_amount": foreign_amount,
    }


def transaction_record(transaction_id: str, *splits: dict) -> dict:
    return {
        "type": "transactions",
        "id": transaction_id,
        "attributes": {"transactions": list(splits)},
    }


def attachment_record(
    attachment_id: str,
    journal_id: str,
    filename: str = "receipt.png",
    mime: str = "image/png",
) -> dict:
    return {
        "type": "attachments",
        "id": attachment_id,
        "attributes": {
            "created_at": "2023-02-10T12:00:00+00:00",
            "updated_at": "2023-02-10T12:00:00+00:00",
            "attachable_id": journal_id,
            "attachable_type": "TransactionJournal",
            "md5": "0" * 32,
            "hash": "0" * 32,
            "filename": filename,
            "download_url": f"{BASE_URL}/api/v1/attachments/{attachment_id}/download",
            "upload_url": f"{BASE_URL}/api/v1/attachments/{attachment_id}/upload",
            "title": filename,
            "notes": None,
            "mime": mime,
            "size": 68,
        },
    }


def currency_document(code: str = "EUR", symbol: str = "€", enabled: bool = True) -> dict:
    return {
        "data": {
            "type": "currencies",
            "id": "1",
            "attributes": {
                "code": code,
                "name": "Euro",
                "symbol": symbol,
                "decimal_places": 2,
                "enabled": enabled,
            },
        }
    }


def _in_range(request: httpx.Request, when: date) -> bool:
    start = date.fromisoformat(request.url.params["start"])
    end = date.fromisoformat(request.url.params["end"])
    return start <= when <= end


class FakeLedger:
    """Consistent Firefly III book for end-to-end tests.

    Account balances, the basic summary and the transaction list are all
    derived from the same journals, so the reconciliation identities hold.
    Period of interest is Q1 2023.
    """

    ASSET_ACCOUNTS = [
        ("1", "Checking", "1000", "2022-06-01T00:00:00+00:00"),
        ("2", "Savings", "500", "2023-02-01T00:00:00+00:00"),
    ]
    OTHER_ACCOUNTS = [
        ("10", "Groceries", "expense"),
        ("20", "Employer", "revenue"),
    ]

    def __init__(self, per_page: int = 2):
        self.per_page = per_page
        self.transactions = [
            transaction_record(
                "99",
                split("991", "opening balance", "1000", "2022-06-01T00:00:00+00:00", "31", "1"),
            ),
            transaction_record(
                "100",
                split("1001", "deposit", "2000", "2023-01-15T09:00:00+00:00", "20", "1",
                      description="Salary"),
            ),
            transaction_record(
                "103",
                split("1031", "opening balance", "500", "2023-02-01T00:00:00+00:00", "30", "2"),
            ),
            transaction_record(
                "101",
                split("1011", "withdrawal", "150.25", "2023-02-10T12:00:00+00:00", "1", "10",
                      description="Weekly shopping", has_attachments=True),
            ),
            transaction_record(
                "102",
                split("1021", "transfer", "300", "2023-03-05T08:30:00+00:00", "1", "2",
                      description="Savings"),
            ),
        ]
        self.attachments = {"101": [attachment_record("7", "1011")]}

    def _splits(self):
        for record in self.transactions:
            for entry in record["attributes"]["transactions"]:
                yield record, entry

    def balance(self, account_id: str, at: date) -> Decimal:
        total = Decimal("0")
        for _, entry in self._splits():
            if date.fromisoformat(entry["date"][:10]) > at:
                continue
            amount = Decimal(entry["amount"])
            if entry["destination_id"] == account_id:
                total += amount
            if entry["source_id"] == account_id:
                total -= amount
        return total

    def accounts(self, request: httpx.Request) -> dict:
        at = date.fromisoformat(request.url.params["date"])
        account_type = request.url.params.get("type", "all")
        records = [
            account_record(
                account_id,
                name,
                self.balance(account_id, at),
                opening_balance=opening,
                opening_balance_date=opened,
            )
            for account_id, name, opening, opened in self.ASSET_ACCOUNTS
        ]
        if account_type == "all":
            records += [
                account_record(
                    account_id,
                    name,
                    self.balance(account_id, at),
                    account_type=kind,
                    opening_balance_date=None,
                )
                for account_id, name, kind in self.OTHER_ACCOUNTS
            ]
        return paginate(request, records, self.per_page)

    def transactions_in_range(self, request: httpx.Request) -> dict:
        records = [
            record
            for record in self.transactions
            if _in_range(
                request,
                date.fromisoformat(record["attributes"]["transactions"][0]["date"][:10]),
            )
        ]
        # Newest first, as the server lists them
        records.reverse()
        return paginate(request, records, self.per_page)

    def summary(self, request: httpx.Request) -> dict:
        earned = Decimal("0")
        spent = Decimal("0")
        for _, entry in self._splits():
            if not _in_range(request, date.fromisoformat(entry["date"][:10])):
                continue
            if entry["type"] == "deposit":
                earned += Decimal(entry["amount"])
            elif entry["type"] == "withdrawal":
                spent -= Decimal(entry["amount"])

        def entry(key, value):
            return {
                "key": key,
                "title": key,
                "monetary_value": str(value),
                "currency_id": "1",
                "currency_code": "EUR",
                "currency_symbol": "€",
                "currency_decimal_places": 2,
            }

        return {
            "earned-in-EUR": entry("earned-in-EUR", earned),
            "spent-in-EUR": entry("spent-in-EUR", spent),
            "balance-in-EUR": entry("balance-in-EUR", earned + spent),
        }

    def install(self, firefly: FakeFirefly) -> None:
        firefly.route("accounts", self.accounts)
        firefly.route("transactions", self.transactions_in_range)
        firefly.route("summary/basic", self.summary)
        for transaction_id, attachments in self.attachments.items():
            firefly.route(
                f"transactions/{transaction_id}/attachments",
                lambda request, items=attachments: paginate(request, items, self.per_page),
            )
        firefly.route("attachments/7/download", lambda request: httpx.Response(200, content=png_bytes()))
        firefly.route("currencies/EUR", currency_document())
        firefly.route(
            "chart/account/overview",
            [
                {
                    "label": "Checking",
                    "currency_code": "EUR",
                    "entries": {
                        "2023-01-01T00:00:00+00:00": "1000",
                        "2023-03-31T00:00:00+00:00": "2549.75",
                    },
                },
                {
                    "label": "Savings",
                    "currency_code": "EUR",
                    "entries": {
                        "2023-01-01T00:00:00+00:00": "0",
                        "2023-03-31T00:00:00+00:00": "800",
                    },
                },
            ],
        )
        firefly.route(
            "insight/income/revenue",
            [{"id": "20", "name": "Employer", "difference": "2000",
              "currency_id": "1", "currency_code": "EUR"}],
        )
        firefly.route("insight/income/category", [])
        firefly.route("insight/income/tag", [])
        firefly.route(
            "insight/expense/expense",
            [{"id": "10", "name": "Groceries", "difference": "-150.25",
              "currency_id": "1", "currency_code": "EUR"}],
        )
        firefly.route(
            "insight/expense/category",
            [
                {"id": "5", "name": "Food", "difference": "-100.25",
                 "currency_id": "1", "currency_code": "EUR"},
                {"id": "6", "name": "Household", "difference": "-50",
                 "currency_id": "1", "currency_code": "EUR"},
            ],
        )
        firefly.route("insight/expense/tag", [])
        firefly.route(
            "about",
            {"data": {"version": "6.1.0", "api_version": "2.1.0",
                      "php_version": "8.3.0", "os": "Linux", "driver": "mysql"}},
        )
