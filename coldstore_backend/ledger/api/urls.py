# ledger/api/urls.py

from django.urls import path

from ledger.api.views import LedgerDetailView, LedgerListCreateView

urlpatterns = [
    path("ledger/", LedgerListCreateView.as_view(), name="ledger-list"),
    path("ledger/<int:ledger_id>/", LedgerDetailView.as_view(), name="ledger-detail"),
]
