# store/urls.py

from django.urls import path

from store.api.views import InstallStoreView, StoreListView

urlpatterns = [
    path("", StoreListView.as_view(), name="store-list"),
    path("install/", InstallStoreView.as_view(), name="store-install"),
]
