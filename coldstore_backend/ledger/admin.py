# ledger/admin.py

from django.contrib import admin

from ledger.models import Ledger

# ============================================================
# LEDGER (STRICTLY IMMUTABLE)
# ============================================================


@admin.register(Ledger)
class LedgerAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "customer",
        "type",
        "debit_amount",
        "credit_amount",
        "is_discount",
        "created_at",
    )
    list_filter = ("type", "is_discount")
    search_fields = ("customer__name", "description")
    ordering = ("-created_at",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
