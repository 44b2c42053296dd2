# cashbook/admin.py

from django.contrib import admin

from cashbook.models import DailyCashSummary, ManualCashTransaction, OpeningBalanceAudit


@admin.register(ManualCashTransaction)
class ManualCashTransactionAdmin(admin.ModelAdmin):
    list_display = ("date", "transaction_type", "amount", "description", "customer", "created_by")
    list_filter = ("transaction_type",)
    search_fields = ("description", "customer__name")
    date_hierarchy = "date"

    # Writes go through cashbook.services.manual_service (ledger mirror).
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(DailyCashSummary)
class DailyCashSummaryAdmin(admin.ModelAdmin):
    list_display = ("date", "opening_balance", "is_reconciled", "reconciled_by", "reconciled_at")
    list_filter = ("is_reconciled",)
    ordering = ("-date",)


@admin.register(OpeningBalanceAudit)
class OpeningBalanceAuditAdmin(admin.ModelAdmin):
    list_display = (
        "summary",
        "old_opening_balance",
        "new_opening_balance",
        "changed_by",
        "change_timestamp",
    )
    search_fields = ("changed_by", "change_reason")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
