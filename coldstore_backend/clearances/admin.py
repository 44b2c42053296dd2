# clearances/admin.py

from django.contrib import admin

from clearances.models import ClearanceReceipt, ClearedItem

# ============================================================
# CLEARANCES (PERMANENT RECORDS, READ-ONLY)
# ============================================================


class ClearedItemInline(admin.TabularInline):
    model = ClearedItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "entry_item",
        "clear_quantity",
        "clear_kj_quantity",
        "days_stored",
        "unit_price",
        "rent_amount",
        "kj_amount",
        "total_amount",
    )
    fields = readonly_fields


@admin.register(ClearanceReceipt)
class ClearanceReceiptAdmin(admin.ModelAdmin):
    list_display = (
        "clearance_no",
        "customer",
        "entry_receipt",
        "clearance_date",
        "total_amount",
        "payment_amount",
        "discount_amount",
    )
    search_fields = ("clearance_no", "customer__name", "entry_receipt__receipt_no")
    date_hierarchy = "clearance_date"
    inlines = [ClearedItemInline]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
