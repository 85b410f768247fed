# store/admin.py

from django.contrib import admin

from store.models import Store


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("uuid", "name", "code", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("uuid", "name", "code")
    ordering = ("name",)
    readonly_fields = ("uuid", "created_at", "updated_at")
