"""Report data collection domain service."""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Sequence

from firereport.api.client import FireflyClient
from firereport.domain.attachments import AttachmentService
from firereport.domain.cancellation import CancellationToken
from firereport.domain.entities import (
    Account,
    Attachment,
    Currency,
    DateRangeBoundaries,
    GeneralOverview,
    GroupBy,
    InsightType,
    ReportData,
    Theme,
    TimeOfDayBoundary,
    TransactionJournal,
)
from firereport.domain.errors import (
    ErrorKind,
    FireflyError,
    InactiveAccountError,
    UnusedCurrencyError,
    inactive_account,
    unused_currency,
)
from firereport.domain.journal import JournalReconciler
from firereport.domain.progress import ProgressTracker
from firereport.domain.summary import ZERO, SummaryService
from firereport.repository import (
    AboutRepository,
    AccountRepository,
    AttachmentRepository,
    ChartRepository,
    CurrencyRepository,
    InsightRepository,
    SummaryRepository,
    TransactionRepository,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionFailure:
    """Why a collection run produced no report."""

    kind: ErrorKind
    message: str
    error: FireflyError


@dataclass(frozen=True)
class CollectionResult:
    """Either a complete report snapshot or a failure, never both."""

    report: Optional[ReportData] = None
    failure: Optional[CollectionFailure] = None

    @property
    def ok(self) -> bool:
        return self.report is not None


def relink_attachments(
    journals: Sequence[TransactionJournal], downloaded: Sequence[Attachment]
) -> list[TransactionJournal]:
    """Replace journal attachments with their downloaded counterparts."""
    by_id = {attachment.id: attachment for attachment in downloaded}
    relinked = []
    for journal in journals:
        if journal.attachments:
            journal = replace(
                journal,
                attachments=tuple(by_id.get(a.id, a) for a in journal.attachments),
            )
        relinked.append(journal)
    return relinked


class DataCollectorService:
    """Sequence every fetcher into one consistent ReportData snapshot.

    The service holds no per-run state: each call of ``get_data`` works on
    local values and either returns a complete snapshot or raises.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        chart_repository: ChartRepository,
        currency_repository: CurrencyRepository,
        insight_repository: InsightRepository,
        about_repository: AboutRepository,
        summary_service: SummaryService,
        journal_reconciler: JournalReconciler,
        attachment_service: AttachmentService,
        progress: Optional[ProgressTracker] = None,
        cancel_token: Optional[CancellationToken] = None,
    ):
        self.account_repository = account_repository
        self.chart_repository = chart_repository
        self.currency_repository = currency_repository
        self.insight_repository = insight_repository
        self.about_repository = about_repository
        self.summary_service = summary_service
        self.journal_reconciler = journal_reconciler
        self.attachment_service = attachment_service
        self.progress = progress or ProgressTracker()
        self.cancel_token = cancel_token

    @classmethod
    def from_client(
        cls,
        client: FireflyClient,
        progress: Optional[ProgressTracker] = None,
        cache_dir: Optional[Path] = None,
        raster_executor: Optional[Executor] = None,
    ) -> "DataCollectorService":
        """Wire every repository and service around one client.

        The client's cancellation token is shared with the pipeline.
        """
        transaction_repository = TransactionRepository(client)
        account_repository = AccountRepository(client)
        progress = progress or ProgressTracker()
        return cls(
            account_repository=account_repository,
            chart_repository=ChartRepository(client),
            currency_repository=CurrencyRepository(client),
            insight_repository=InsightRepository(client),
            about_repository=AboutRepository(client),
            summary_service=SummaryService(
                account_repository, transaction_repository, SummaryRepository(client)
            ),
            journal_reconciler=JournalReconciler(
                transaction_repository, AttachmentRepository(client)
            ),
            attachment_service=AttachmentService(
                client,
                cache_dir=cache_dir,
                progress=progress,
                cancel_token=client.cancel_token,
                raster_executor=raster_executor,
            ),
            progress=progress,
            cancel_token=client.cancel_token,
        )

    def _step(self, message: str) -> None:
        if self.cancel_token is not None:
            self.cancel_token.raise_if_cancelled()
        logger.info("%s...", message)
        self.progress.report(message)

    def collect_accounts(self, date_range: DateRangeBoundaries) -> list[Account]:
        """Fetch asset accounts, requiring one that existed during the period.

        Raises:
            InactiveAccountError: If no account was opened before the period ended
        """
        accounts = self.account_repository.get_asset_accounts(date_range)
        if not self.account_repository.has_active_account_in_range(date_range, accounts):
            raise InactiveAccountError(inactive_account(date_range.period, date_range.year))
        return accounts

    def resolve_currency(
        self, accounts: Sequence[Account], currency_code: Optional[str] = None
    ) -> Currency:
        """Resolve the report currency from an override or the first account."""
        code = currency_code or accounts[0].currency_code
        return self.currency_repository.fetch_currency(code)

    def get_data(
        self,
        date_range: DateRangeBoundaries,
        theme: Theme = Theme.LIGHT,
        with_attachments: bool = False,
        currency_code: Optional[str] = None,
    ) -> ReportData:
        """Collect a complete report snapshot for a period.

        Args:
            date_range: Report period; start must be before end
            theme: Theme passed through to the renderer
            with_attachments: Download and rasterize attachments
            currency_code: Report currency (defaults to the first account's)

        Returns:
            ReportData snapshot

        Raises:
            IllegalDateRangeError: If start is not before end
            InactiveAccountError: If no account existed during the period
            InvalidCurrencyCodeError: If the currency is unknown or disabled
            UnusedCurrencyError: If no chart series uses the currency
            MultipleCurrencyError: If a journal mixes currencies
            ClientError, ServerError: On failed API requests
            ReportCancelledError: If the run was cancelled
        """
        date_range.validate()
        self.progress.reset()

        self._step("Collecting accounts and charts data")
        accounts = self.collect_accounts(date_range)
        currency = self.resolve_currency(accounts, currency_code)
        chart = self.chart_repository.get_charts(date_range, currency.code)

        self._step("Collecting general overview data")
        overview = self._overview_for(date_range, currency)
        initial_balances = self.summary_service.get_asset_balance_at_date(
            date_range.start_date, GroupBy.ACCOUNT, TimeOfDayBoundary.START
        )
        ending_balances = self.summary_service.get_asset_balance_at_date(
            date_range.end_date, GroupBy.ACCOUNT, TimeOfDayBoundary.END
        )
        accounts = [
            replace(
                account,
                initial_balance=initial_balances.get(account.id, ZERO),
                initial_balance_date=date_range.start_date,
                current_balance=ending_balances.get(account.id, ZERO),
            )
            for account in accounts
        ]

        self._step("Collecting transactions data")
        journals = self.journal_reconciler.collect_journals(date_range, initial_balances)

        self._step("Collecting income insight")
        income_insight = self.insight_repository.get_insights(InsightType.INCOME, date_range)

        self._step("Collecting expense insight")
        expense_insight = self.insight_repository.get_insights(InsightType.EXPENSE, date_range)

        self._step("Downloading attachments")
        downloaded: list[Attachment] = []
        if with_attachments:
            downloaded = self.attachment_service.download_attachments(
                [journal for journal in journals if journal.has_attachments]
            )
            journals = relink_attachments(journals, downloaded)

        self._step("Collecting server information")
        system_info = self.about_repository.get_system_info()

        report = ReportData(
            date_range=date_range,
            theme=theme,
            currency=currency,
            accounts=tuple(accounts),
            chart=chart,
            general_overview=overview,
            income_insight=tuple(income_insight),
            expense_insight=tuple(expense_insight),
            transaction_journals=tuple(journals),
            downloaded_attachments=tuple(downloaded),
            system_info=system_info,
        )
        self._step("Data collected")
        return report

    def _overview_for(self, date_range: DateRangeBoundaries, currency: Currency) -> GeneralOverview:
        overviews = self.summary_service.get_full_overview(date_range)
        overview = overviews.get(currency.code)
        if overview is None:
            raise UnusedCurrencyError(unused_currency(currency.code))
        return overview

    def collect(
        self,
        date_range: DateRangeBoundaries,
        theme: Theme = Theme.LIGHT,
        with_attachments: bool = False,
        currency_code: Optional[str] = None,
    ) -> CollectionResult:
        """Run ``get_data`` and return its outcome as a tagged result."""
        try:
            report = self.get_data(
                date_range,
                theme=theme,
                with_attachments=with_attachments,
                currency_code=currency_code,
            )
        except FireflyError as e:
            logger.error("Report collection failed (%s): %s", e.kind.value, e)
            self.progress.send_message(str(e))
            self.progress.reset()
            return CollectionResult(failure=CollectionFailure(kind=e.kind, message=str(e), error=e))
        return CollectionResult(report=report)
