# inventory/admin.py

from django.contrib import admin

from inventory.models import EntryItem, EntryReceipt


class EntryItemInline(admin.TabularInline):
    model = EntryItem
    extra = 0
    fields = (
        "product_type",
        "pack_type",
        "room",
        "marka",
        "quantity",
        "remaining_quantity",
        "unit_price",
        "kj_quantity",
        "remaining_kj_quantity",
        "grand_total",
    )
    # Lots change only through the entry service and the lot tracker.
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(EntryReceipt)
class EntryReceiptAdmin(admin.ModelAdmin):
    list_display = ("receipt_no", "customer", "car_no", "entry_date", "total_amount")
    search_fields = ("receipt_no", "car_no", "customer__name")
    date_hierarchy = "entry_date"
    readonly_fields = ("receipt_no", "customer", "total_amount", "created_at", "updated_at")
    inlines = [EntryItemInline]

    def has_delete_permission(self, request, obj=None):
        return False
