# accounting/api/views/__init__.py

"""
accounting.api.views package

Do NOT import the url modules from here (circular imports).
"""

from accounting.api.views.accounts import (
    AccountCategoriesView,
    AccountDetailView,
    AccountListCreateView,
    FinancialReportView,
)
from accounting.api.views.journal_configs import (
    JournalConfigDetailView,
    JournalConfigDiscoveryView,
    JournalConfigListCreateView,
)
from accounting.api.views.journals import (
    JournalChartView,
    JournalCreateView,
    JournalReportView,
    JournalVerifyView,
    StockAdjustmentView,
)

__all__ = [
    "AccountListCreateView",
    "AccountCategoriesView",
    "AccountDetailView",
    "FinancialReportView",
    "JournalConfigListCreateView",
    "JournalConfigDiscoveryView",
    "JournalConfigDetailView",
    "JournalCreateView",
    "StockAdjustmentView",
    "JournalReportView",
    "JournalVerifyView",
    "JournalChartView",
]
