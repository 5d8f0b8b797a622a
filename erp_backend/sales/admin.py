# sales/admin.py

from django.contrib import admin

from sales.models import Sale, SaleItem


# ======================================================
# SALE ITEM INLINE
# ======================================================


class SaleItemInline(admin.TabularInline):
    model = SaleItem
    extra = 0
    readonly_fields = ("total_price",)


# ======================================================
# SALE ADMIN
# ======================================================


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = (
        "sale_number",
        "company",
        "sale_date",
        "status",
        "on_credit",
        "total_amount",
        "posting_status",
        "created_at",
    )
    readonly_fields = (
        "sale_number",
        "total_amount",
        "journal_entry",
        "cogs_journal_entry",
        "posting_status",
        "posting_error",
        "posted_at",
        "created_at",
        "updated_at",
    )
    search_fields = ("sale_number", "customer_name")
    list_filter = ("status", "posting_status", "company", "sale_date")
    inlines = [SaleItemInline]
