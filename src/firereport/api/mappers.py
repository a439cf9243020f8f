"""Mapper functions to convert Firefly III API records to domain entities.

This layer isolates the wire format, so default substitution (missing
opening balances, missing currency metadata) happens exactly once, here.
"""

from decimal import Decimal
from typing import Any

from firereport.domain import entities as domain
from firereport.utils.amount_parser import parse_amount, parse_optional_amount
from firereport.utils.date_parser import parse_local_date, parse_timestamp


def _decimal_places(value: Any, default: int = 2) -> int:
    return default if value is None else int(value)


def account_to_domain(record: dict[str, Any]) -> domain.Account:
    """Convert an account API record to a domain Account entity."""
    attr = record["attributes"]
    opening_balance = parse_optional_amount(attr.get("opening_balance"))
    decimal_places = attr.get("currency_decimal_places")
    return domain.Account(
        id=str(record["id"]),
        name=attr["name"],
        type=attr.get("type", ""),
        currency_code=attr.get("currency_code") or "",
        currency_symbol=attr.get("currency_symbol") or "",
        currency_decimal_places=_decimal_places(decimal_places),
        current_balance=parse_amount(attr.get("current_balance", "0")),
        current_balance_date=parse_timestamp(attr.get("current_balance_date")),
        account_number=attr.get("account_number"),
        iban=attr.get("iban"),
        opening_balance=opening_balance if opening_balance is not None else Decimal("0"),
        opening_balance_date=parse_local_date(attr.get("opening_balance_date")),
    )


def attachment_to_domain(record: dict[str, Any]) -> domain.Attachment:
    """Convert an attachment API record to a domain Attachment entity."""
    attr = record["attributes"]
    return domain.Attachment(
        type=record.get("type", "attachments"),
        id=str(record["id"]),
        created_at=parse_timestamp(attr["created_at"]),
        updated_at=parse_timestamp(attr["updated_at"]),
        attachable_id=str(attr["attachable_id"]),
        attachable_type=attr.get("attachable_type", ""),
        md5=attr.get("md5"),
        hash=attr.get("hash"),
        filename=attr["filename"],
        download_url=attr["download_url"],
        upload_url=attr.get("upload_url", ""),
        title=attr.get("title"),
        notes=attr.get("notes"),
        mime=attr.get("mime") or "",
        size=int(attr.get("size") or 0),
    )


def journal_to_domain(transaction_id: str, split: dict[str, Any]) -> domain.TransactionJournal:
    """Convert one journal split of a transaction record.

    The amount is signed: outflow types (withdrawal, expense) are negated.
    """
    journal_type = split["type"]
    amount = parse_amount(split["amount"])
    if journal_type in domain.OUTFLOW_TYPES:
        amount = -amount

    return domain.TransactionJournal(
        journal_id=str(split["transaction_journal_id"]),
        transaction_id=str(transaction_id),
        type=journal_type,
        datetime=parse_timestamp(split["date"]),
        order=int(split.get("order") or 0),
        currency_code=split.get("currency_code") or "",
        currency_symbol=split.get("currency_symbol") or "",
        currency_decimal_places=_decimal_places(split.get("currency_decimal_places")),
        amount=amount,
        description=split.get("description") or "",
        source_id=str(split["source_id"]),
        source_name=split.get("source_name") or "",
        source_type=split.get("source_type") or "",
        destination_id=str(split["destination_id"]),
        destination_name=split.get("destination_name") or "",
        destination_type=split.get("destination_type") or "",
        budget_id=split.get("budget_id"),
        budget_name=split.get("budget_name"),
        category_id=split.get("category_id"),
        category_name=split.get("category_name"),
        bill_id=split.get("bill_id"),
        bill_name=split.get("bill_name"),
        tags=tuple(split.get("tags") or ()),
        has_attachments=bool(split.get("has_attachments", False)),
        foreign_currency_code=split.get("foreign_currency_code"),
        foreign_amount=parse_optional_amount(split.get("foreign_amount")),
    )


def transaction_to_domain(record: dict[str, Any]) -> domain.TransactionGroup:
    """Convert a transaction API record and all of its journal splits."""
    transaction_id = str(record["id"])
    splits = record["attributes"].get("transactions") or []
    return domain.TransactionGroup(
        id=transaction_id,
        journals=tuple(journal_to_domain(transaction_id, split) for split in splits),
    )


def currency_to_domain(record: dict[str, Any]) -> domain.Currency:
    attr = record["attributes"]
    decimal_places = attr.get("decimal_places")
    return domain.Currency(
        code=attr["code"],
        id=str(record["id"]),
        symbol=attr.get("symbol") or "",
        decimal_places=_decimal_places(decimal_places, default=0),
        name=attr.get("name") or "",
    )


def summary_entry_to_domain(key: str, record: dict[str, Any]) -> domain.SummaryEntry:
    """Convert one entry of the basic summary mapping."""
    decimal_places = record.get("currency_decimal_places")
    return domain.SummaryEntry(
        key=record.get("key") or key,
        monetary_value=parse_amount(record.get("monetary_value", "0")),
        currency_id=str(record.get("currency_id") or ""),
        currency_code=record.get("currency_code") or "",
        currency_symbol=record.get("currency_symbol") or "",
        currency_decimal_places=_decimal_places(decimal_places),
    )


def insight_item_to_domain(record: dict[str, Any]) -> domain.InsightItem:
    return domain.InsightItem(
        id=str(record.get("id") or ""),
        name=record.get("name") or "",
        difference=parse_amount(record.get("difference", "0")),
        currency_id=str(record.get("currency_id") or ""),
        currency_code=record.get("currency_code") or "",
    )


def chart_entries_to_domain(entries: dict[str, Any]) -> tuple[domain.ChartEntry, ...]:
    """Convert a chart series' {timestamp: value} mapping in key order."""
    return tuple(
        domain.ChartEntry(label=parse_local_date(key), value=parse_amount(value))
        for key, value in entries.items()
    )


def system_info_to_domain(record: dict[str, Any]) -> domain.SystemInfo:
    return domain.SystemInfo(
        version=str(record.get("version") or ""),
        api_version=str(record.get("api_version") or ""),
        php_version=str(record.get("php_version") or ""),
        os=str(record.get("os") or ""),
        driver=str(record.get("driver") or ""),
    )
