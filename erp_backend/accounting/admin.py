# accounting/admin.py

from django.contrib import admin

from accounting.models import (
    Account,
    EntryNumberSequence,
    Expense,
    ExpenseCategoryAccount,
    JournalEntry,
    JournalEntryLine,
)

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "account_type",
        "company",
        "parent",
        "is_active",
    )
    list_filter = ("account_type", "is_active", "company")
    search_fields = ("code", "name")
    ordering = ("company", "code")
    readonly_fields = ("created_at", "updated_at")

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("company", "code", "name", "account_type", "parent"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active",),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )


# ============================================================
# JOURNAL ENTRY (READ-ONLY)
# ============================================================


class JournalEntryLineInline(admin.TabularInline):
    model = JournalEntryLine
    extra = 0
    can_delete = False
    fields = ("line_number", "account", "description", "debit_amount", "credit_amount")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = (
        "entry_number",
        "company",
        "entry_date",
        "description",
        "reference",
        "total_debit",
        "numbering_fallback",
        "created_at",
    )
    list_filter = ("company", "entry_date", "numbering_fallback")
    search_fields = ("entry_number", "description", "reference")
    ordering = ("-entry_date", "-created_at")
    inlines = [JournalEntryLineInline]

    readonly_fields = (
        "company",
        "activity",
        "entry_number",
        "numbering_fallback",
        "entry_date",
        "description",
        "reference",
        "idempotency_key",
        "total_debit",
        "total_credit",
        "reverses",
        "created_by",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# EXPENSES
# ============================================================


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display = (
        "title",
        "company",
        "category",
        "amount",
        "expense_date",
        "payment_source",
        "posting_status",
    )
    list_filter = ("category", "posting_status", "payment_source", "company")
    search_fields = ("title", "description")
    readonly_fields = ("journal_entry", "posting_status", "posting_error", "posted_at", "created_at")


@admin.register(ExpenseCategoryAccount)
class ExpenseCategoryAccountAdmin(admin.ModelAdmin):
    list_display = ("company", "category", "account", "updated_at")
    list_filter = ("company", "category")


# ============================================================
# NUMBERING
# ============================================================


@admin.register(EntryNumberSequence)
class EntryNumberSequenceAdmin(admin.ModelAdmin):
    list_display = ("company", "key", "prefix", "last_number", "updated_at")
    list_filter = ("key",)
    readonly_fields = ("last_number", "updated_at")
