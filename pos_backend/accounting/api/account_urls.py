# accounting/api/account_urls.py

from django.urls import path

from accounting.api.views.accounts import (
    AccountCategoriesView,
    AccountDetailView,
    AccountListCreateView,
    FinancialReportView,
)

urlpatterns = [
    path("", AccountListCreateView.as_view(), name="account-list"),
    path("categories/", AccountCategoriesView.as_view(), name="account-categories"),
    path("report/financial/", FinancialReportView.as_view(), name="account-financial-report"),
    path("<str:uuid>/", AccountDetailView.as_view(), name="account-detail"),
]
