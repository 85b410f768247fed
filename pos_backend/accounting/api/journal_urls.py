# accounting/api/journal_urls.py

from django.urls import path

from accounting.api.views.journals import (
    JournalChartView,
    JournalCreateView,
    JournalReportView,
    JournalVerifyView,
    StockAdjustmentView,
)

# (url, transaction type, route name)
POSTING_ROUTES = [
    ("sale/", "SALE", "journal-sale"),
    ("buy/", "BUY", "journal-buy"),
    ("return/sale/", "RETURN_SALE", "journal-return-sale"),
    ("return/buy/", "RETURN_BUY", "journal-return-buy"),
    ("debt/ar/", "AR", "journal-debt-ar"),
    ("debt/ap/", "AP", "journal-debt-ap"),
    ("payment/ar/", "PAY_AR", "journal-payment-ar"),
    ("payment/ap/", "PAY_AP", "journal-payment-ap"),
]

urlpatterns = [
    path(url, JournalCreateView.as_view(transaction_type=tx_type), name=name)
    for url, tx_type, name in POSTING_ROUTES
] + [
    path("stock-adjustment/", StockAdjustmentView.as_view(), name="journal-stock-adjustment"),
    path("report/", JournalReportView.as_view(), name="journal-report"),
    path(
        "report/<str:transaction_type>/",
        JournalReportView.as_view(),
        name="journal-report-type",
    ),
    path("chart/", JournalChartView.as_view(), name="journal-chart"),
    path("<str:code>/verify/", JournalVerifyView.as_view(), name="journal-verify"),
]
