# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import (
    AccountCategorySerializer,
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
)
from accounting.api.serializers.journal_configs import (
    DiscoveryRowSerializer,
    JournalConfigReplaceSerializer,
    JournalConfigSerializer,
)
from accounting.api.serializers.journals import (
    JournalCreateSerializer,
    JournalPostingSerializer,
    JournalSerializer,
    StockAdjustmentSerializer,
)
from accounting.api.serializers.reports import (
    ChartPointSerializer,
    DateRangeQuerySerializer,
    FinancialReportRowSerializer,
)

__all__ = [
    "AccountSerializer",
    "AccountCreateSerializer",
    "AccountUpdateSerializer",
    "AccountCategorySerializer",
    "JournalSerializer",
    "JournalCreateSerializer",
    "JournalPostingSerializer",
    "StockAdjustmentSerializer",
    "JournalConfigSerializer",
    "JournalConfigReplaceSerializer",
    "DiscoveryRowSerializer",
    "DateRangeQuerySerializer",
    "FinancialReportRowSerializer",
    "ChartPointSerializer",
]
