# accounting/api/journal_config_urls.py

from django.urls import path

from accounting.api.views.journal_configs import (
    JournalConfigDetailView,
    JournalConfigDiscoveryView,
    JournalConfigListCreateView,
)

urlpatterns = [
    path("", JournalConfigListCreateView.as_view(), name="journal-config-list"),
    path("discovery/", JournalConfigDiscoveryView.as_view(), name="journal-config-discovery"),
    path("<str:uuid>/", JournalConfigDetailView.as_view(), name="journal-config-detail"),
]
