# core/admin.py

from django.contrib import admin

from core.models import PackType, ProductSubType, ProductType, Room


class ProductSubTypeInline(admin.TabularInline):
    model = ProductSubType
    extra = 0


@admin.register(ProductType)
class ProductTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "created_at")
    search_fields = ("name",)
    inlines = [ProductSubTypeInline]


@admin.register(PackType)
class PackTypeAdmin(admin.ModelAdmin):
    list_display = ("name", "rent_per_day")
    search_fields = ("name",)


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("name", "room_type", "capacity", "is_active")
    list_filter = ("room_type", "is_active")
    search_fields = ("name",)
