# cashbook/api/urls.py

from django.urls import path

from cashbook.api.views import (
    CashBookEntryDetailView,
    CashBookListCreateView,
    CashBookReconcileView,
    CashBookReportView,
    CashBookSummaryView,
    OpeningBalanceAuditView,
)

urlpatterns = [
    path("cash-book/", CashBookListCreateView.as_view(), name="cash-book"),
    path("cash-book/summary/", CashBookSummaryView.as_view(), name="cash-book-summary"),
    path(
        "cash-book/summary/<str:day>/",
        CashBookReconcileView.as_view(),
        name="cash-book-summary-reconcile",
    ),
    path("cash-book/reports/", CashBookReportView.as_view(), name="cash-book-reports"),
    path("cash-book/audit/", OpeningBalanceAuditView.as_view(), name="cash-book-audit"),
    # keep last: <entry_id> would match the fixed segments above
    path("cash-book/<str:entry_id>/", CashBookEntryDetailView.as_view(), name="cash-book-entry"),
]
