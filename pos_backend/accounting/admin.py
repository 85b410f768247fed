# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.journal import Journal, JournalDetail
from accounting.models.journal_config import JournalConfig

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "category",
        "normal_balance",
        "store",
        "parent",
        "is_system",
    )
    list_filter = ("category", "normal_balance", "is_system", "store")
    search_fields = ("code", "name", "uuid")
    ordering = ("store", "code")
    readonly_fields = ("uuid", "is_system", "created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("uuid", "store", "code", "name"),
            },
        ),
        (
            "Classification",
            {
                "fields": ("category", "normal_balance", "parent", "is_system"),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_system:
            return False
        return super().has_delete_permission(request, obj)


# ============================================================
# JOURNAL CONFIG
# ============================================================


@admin.register(JournalConfig)
class JournalConfigAdmin(admin.ModelAdmin):
    list_display = (
        "transaction_type",
        "detail_key",
        "match_mode",
        "position",
        "account",
        "store",
        "deleted_at",
    )
    list_filter = ("transaction_type", "match_mode", "position", "store")
    search_fields = ("transaction_type", "detail_key", "account__code")
    ordering = ("transaction_type", "detail_key", "position")
    readonly_fields = (
        "uuid",
        "created_at",
        "updated_at",
        "deleted_at",
        "created_by",
        "updated_by",
        "deleted_by",
    )

    def get_queryset(self, request):
        return JournalConfig.all_objects.select_related("account", "store")


# ============================================================
# JOURNAL (READ-ONLY)
# ============================================================


class JournalDetailInline(admin.TabularInline):
    model = JournalDetail
    fields = ("position", "key", "value", "created_by")
    readonly_fields = fields
    ordering = ("position",)
    extra = 0
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Journal)
class JournalAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "created_by",
        "verified_by",
        "verified_at",
        "created_at",
    )
    search_fields = ("code",)
    ordering = ("-created_at",)
    inlines = [JournalDetailInline]

    readonly_fields = (
        "uuid",
        "code",
        "created_by",
        "verified_by",
        "verified_at",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
