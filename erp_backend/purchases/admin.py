# purchases/admin.py

from django.contrib import admin

from purchases.models import Purchase, PurchaseItem


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0
    readonly_fields = ("total_price",)


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = (
        "purchase_number",
        "company",
        "purchase_date",
        "supplier_name",
        "status",
        "total_amount",
        "posting_status",
    )
    readonly_fields = (
        "purchase_number",
        "total_amount",
        "journal_entry",
        "posting_status",
        "posting_error",
        "posted_at",
        "created_at",
        "updated_at",
    )
    search_fields = ("purchase_number", "supplier_name")
    list_filter = ("status", "posting_status", "company")
    inlines = [PurchaseItemInline]
