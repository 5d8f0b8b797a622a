# accounting/api/filters.py

"""
FilterSets for the accounting list endpoints.

django-filter parses and validates the query string (dates, ids, booleans);
the filtering itself is delegated to the read services so the API and
the services share one definition of each filter.
"""

import django_filters

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.services.chart_service import list_accounts
from accounting.services.journal_query_service import list_entries
from companies.session import resolve_session


class JournalEntryFilterSet(django_filters.FilterSet):
    search = django_filters.CharFilter(label="Entry number, description or reference (contains)")
    date_from = django_filters.DateFilter(label="Entry date from (YYYY-MM-DD)")
    date_to = django_filters.DateFilter(label="Entry date to (YYYY-MM-DD)")
    month = django_filters.CharFilter(label="Entry month (YYYY-MM)")
    reference = django_filters.CharFilter(label="Reference (exact)")
    activity = django_filters.NumberFilter(label="Activity id")
    account = django_filters.NumberFilter(label="Entries touching this account id")

    class Meta:
        model = JournalEntry
        fields = []

    def filter_queryset(self, queryset):
        data = self.form.cleaned_data
        session = resolve_session(self.request)
        return list_entries(
            session.company,
            search=data.get("search"),
            date_from=data.get("date_from"),
            date_to=data.get("date_to"),
            month=data.get("month"),
            reference=data.get("reference"),
            activity=int(data["activity"]) if data.get("activity") is not None else None,
            account=int(data["account"]) if data.get("account") is not None else None,
        )


class AccountFilterSet(django_filters.FilterSet):
    account_type = django_filters.CharFilter(label="ASSET, LIABILITY, EQUITY, REVENUE or EXPENSE")
    active_only = django_filters.BooleanFilter(label="Only active accounts")
    search = django_filters.CharFilter(label="Code or name (contains)")

    class Meta:
        model = Account
        fields = []

    def filter_queryset(self, queryset):
        data = self.form.cleaned_data
        session = resolve_session(self.request)
        return list_accounts(
            session.company,
            account_type=data.get("account_type") or None,
            active_only=bool(data.get("active_only")),
            search=data.get("search"),
        ).select_related("parent")
