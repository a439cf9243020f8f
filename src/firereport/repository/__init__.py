"""Paginated Firefly III resource fetchers."""

from firereport.repository.about import AboutRepository
from firereport.repository.accounts import AccountRepository
from firereport.repository.attachments import AttachmentRepository
from firereport.repository.charts import ChartRepository
from firereport.repository.currencies import CurrencyRepository
from firereport.repository.insights import InsightRepository
from firereport.repository.summary import SummaryRepository
from firereport.repository.transactions import TransactionRepository

__all__ = [
    "AboutRepository",
    "AccountRepository",
    "AttachmentRepository",
    "ChartRepository",
    "CurrencyRepository",
    "InsightRepository",
    "SummaryRepository",
    "TransactionRepository",
]
