# accounting/services/overview_service.py

"""
ACCOUNTING OVERVIEW KPI SERVICE

Ledger-driven KPI aggregation for the accounting dashboard.

Contract:
- account_count: accounts in the chart (active + inactive)
- entries_this_month: journal entries dated in today's month
- revenue_total / expense_total / net_result: all-time, up to today
- unbalanced_entries: integrity check (0 in a healthy ledger)
- Read-only: no mutations, no postings.
"""

from __future__ import annotations

from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.services.balance_service import _q2, _to_minor_int, get_totals_by_account_type, parse_date
from accounting.services.journal_query_service import count_unbalanced_entries


def get_accounting_overview(company, today=None) -> dict:
    today = parse_date(today, field="today") or timezone.localdate()
    month_start = today.replace(day=1)

    totals = get_totals_by_account_type(company=company, end=today)
    revenue = _q2(totals[Account.REVENUE])
    expenses = _q2(totals[Account.EXPENSE])
    net = _q2(revenue - expenses)

    return {
        "as_of": today.isoformat(),
        "account_count": Account.objects.filter(company=company).count(),
        "active_account_count": Account.objects.filter(company=company, is_active=True).count(),
        "entries_this_month": JournalEntry.objects.filter(
            company=company,
            entry_date__gte=month_start,
            entry_date__lte=today,
        ).count(),
        "revenue_total": revenue,
        "expense_total": expenses,
        "net_result": net,
        "net_result_minor": _to_minor_int(net),
        "unbalanced_entries": count_unbalanced_entries(company),
    }
