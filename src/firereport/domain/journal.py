"""Transaction journal reconciliation domain service."""

import logging
import warnings
from collections import defaultdict
from dataclasses import replace
from datetime import timedelta
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from firereport.domain.entities import (
    INFLOW_TYPES,
    OPENING_BALANCE_TYPE,
    OUTFLOW_TYPES,
    Attachment,
    DateRangeBoundaries,
    GeneralOverview,
    TransactionGroup,
    TransactionJournal,
)
from firereport.domain.errors import MultipleCurrencyError, multiple_currency_journal
from firereport.repository.attachments import AttachmentRepository
from firereport.repository.transactions import TransactionRepository

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def journal_element_id(journal: TransactionJournal) -> str:
    """Stable anchor id '{epoch seconds}-{journal id}'."""
    return f"{int(journal.datetime.timestamp())}-{journal.journal_id}"


class AttachmentPool:
    """Pending attachments indexed by the journal id they belong to.

    Each attachment can be taken at most once; taking a journal's
    attachments removes them from the pool.
    """

    def __init__(self, attachments: Iterable[Attachment] = ()):
        self._by_journal: dict[str, list[Attachment]] = defaultdict(list)
        self.add(attachments)

    def add(self, attachments: Iterable[Attachment]) -> None:
        for attachment in attachments:
            self._by_journal[attachment.attachable_id].append(attachment)

    def take(self, journal_id: str) -> list[Attachment]:
        return self._by_journal.pop(journal_id, [])

    def __len__(self) -> int:
        return sum(len(items) for items in self._by_journal.values())


def link_attachments(
    journal: TransactionJournal, element_id: str, pool: AttachmentPool
) -> TransactionJournal:
    """Assign element ids and pooled attachments to a journal."""
    attachments = tuple(
        replace(
            attachment,
            element_id=f"{element_id}-{attachment.id}",
            parent_id=element_id,
            parent_description=journal.description,
        )
        for attachment in pool.take(journal.journal_id)
    )
    return replace(
        journal,
        attachments=attachments,
        element_id=element_id,
        first_attachment_element_id=attachments[0].element_id if attachments else None,
    )


def check_single_currency(journal: TransactionJournal) -> None:
    """Raise MultipleCurrencyError for journals with a differing foreign currency."""
    foreign = journal.foreign_currency_code
    if foreign is not None and foreign != journal.currency_code:
        raise MultipleCurrencyError(
            multiple_currency_journal(journal.journal_id, journal.currency_code, foreign)
        )


class JournalReconciler:
    """Walk transactions once, producing journals with running balances."""

    def __init__(
        self,
        transaction_repository: TransactionRepository,
        attachment_repository: AttachmentRepository,
    ):
        """Initialize journal reconciler.

        Args:
            transaction_repository: Fetcher for transactions in a period
            attachment_repository: Fetcher for per-transaction attachments
        """
        self.transaction_repository = transaction_repository
        self.attachment_repository = attachment_repository

    def build_attachment_pool(self, transactions: Sequence[TransactionGroup]) -> AttachmentPool:
        """Fetch attachments of every transaction with a flagged journal."""
        pool = AttachmentPool()
        for transaction in transactions:
            if transaction.has_attachments:
                pool.add(self.attachment_repository.get_attachments_by_transaction_id(transaction.id))
        return pool

    def collect_journals(
        self, date_range: DateRangeBoundaries, initial_balances: Mapping[str, Decimal]
    ) -> list[TransactionJournal]:
        """Fetch a period's transactions and attachments and reconcile them."""
        transactions = self.transaction_repository.fetch_transactions(date_range)
        pool = self.build_attachment_pool(transactions)
        journals = self.reconcile(transactions, initial_balances, pool)
        if len(pool):
            logger.warning("%d attachments did not match any journal", len(pool))
        return journals

    def reconcile(
        self,
        transactions: Sequence[TransactionGroup],
        initial_balances: Mapping[str, Decimal],
        pool: Optional[AttachmentPool] = None,
    ) -> list[TransactionJournal]:
        """Compute per-account running balances in one chronological pass.

        Transactions must already be sorted by first-journal date. A journal
        id seen before is skipped entirely. Each new journal debits its
        source account and credits its destination, and records both
        balances as they stand right after that mutation.

        Args:
            transactions: Chronologically sorted transaction records
            initial_balances: Account id -> balance at the start of the period
            pool: Pending attachments to link (defaults to none)

        Returns:
            Reconciled journals in processing order

        Raises:
            MultipleCurrencyError: If a journal carries a differing foreign currency
        """
        if pool is None:
            pool = AttachmentPool()
        balances: dict[str, Decimal] = defaultdict(lambda: ZERO, initial_balances)
        seen: set[str] = set()
        journals: list[TransactionJournal] = []

        for transaction in transactions:
            for journal in transaction.journals:
                if journal.journal_id in seen:
                    continue
                seen.add(journal.journal_id)
                check_single_currency(journal)

                balances[journal.source_id] -= journal.magnitude
                balances[journal.destination_id] += journal.magnitude

                linked = link_attachments(journal, journal_element_id(journal), pool)
                journals.append(
                    replace(
                        linked,
                        source_balance_left=balances[journal.source_id],
                        destination_balance_left=balances[journal.destination_id],
                    )
                )

        return journals

    def reconcile_with_overview(
        self,
        transactions: Sequence[TransactionGroup],
        overview: GeneralOverview,
        date_range: DateRangeBoundaries,
        pool: Optional[AttachmentPool] = None,
    ) -> list[TransactionJournal]:
        """Compute a single global running balance (deprecated).

        Superseded by ``reconcile``, which tracks every account separately.
        Starting from ``overview.initial_balance``, deposits and withdrawals
        move the total; an opening-balance journal counts only when dated
        within [start + 1 day, end). Other types leave it unchanged.
        """
        warnings.warn(
            "reconcile_with_overview is deprecated; use reconcile with per-account balances",
            DeprecationWarning,
            stacklevel=2,
        )
        if pool is None:
            pool = AttachmentPool()
        balance = overview.initial_balance
        window_start = date_range.start_date + timedelta(days=1)
        seen: set[str] = set()
        journals: list[TransactionJournal] = []

        for transaction in transactions:
            for journal in transaction.journals:
                if journal.journal_id in seen:
                    continue
                seen.add(journal.journal_id)

                if journal.type in OUTFLOW_TYPES or journal.type in INFLOW_TYPES:
                    balance += journal.amount
                elif journal.type == OPENING_BALANCE_TYPE:
                    if window_start <= journal.datetime.date() < date_range.end_date:
                        balance += journal.amount

                linked = link_attachments(journal, journal_element_id(journal), pool)
                journals.append(
                    replace(
                        linked,
                        balance_left=balance,
                        source_balance_left=balance,
                        destination_balance_left=balance,
                    )
                )

        return journals
