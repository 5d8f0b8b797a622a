# companies/admin.py

from django.contrib import admin

from companies.models import Activity, Company, Membership


class ActivityInline(admin.TabularInline):
    model = Activity
    extra = 0
    fields = ("name", "manager_name", "is_active")


@admin.register(Company)
class CompanyAdmin(admin.ModelAdmin):
    list_display = ("name", "tax_number", "is_active", "created_at")
    list_filter = ("is_active",)
    search_fields = ("name", "tax_number")
    readonly_fields = ("created_at",)
    inlines = [ActivityInline]


@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ("user", "company", "activity", "role", "is_active")
    list_filter = ("role", "is_active", "company")
    search_fields = ("user__username", "user__email", "company__name")
    autocomplete_fields = ("company",)
    readonly_fields = ("created_at",)
