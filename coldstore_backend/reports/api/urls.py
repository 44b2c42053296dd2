# reports/api/urls.py

from django.urls import path

from reports.api.views import CustomerWiseReportView, DashboardStatsView, RoomWiseReportView

urlpatterns = [
    path("dashboard/stats/", DashboardStatsView.as_view(), name="dashboard-stats"),
    path("reports/room-wise/", RoomWiseReportView.as_view(), name="report-room-wise"),
    path("reports/customer-wise/", CustomerWiseReportView.as_view(), name="report-customer-wise"),
]
