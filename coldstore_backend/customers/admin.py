# customers/admin.py

from django.contrib import admin

from customers.models import Customer


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ("name", "father_name", "phone", "village", "created_at")
    search_fields = ("name", "father_name", "phone", "village")
    list_filter = ("village",)
    readonly_fields = ("created_at", "updated_at")
