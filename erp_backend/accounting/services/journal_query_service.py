# accounting/services/journal_query_service.py

"""
JOURNAL QUERIES (READ-ONLY)

- list_entries: the journal listing (search + filters), newest first
- count_unbalanced_entries: integrity check, 0 in a healthy ledger
"""

from __future__ import annotations

import re
from decimal import Decimal

from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce

from accounting.models.journal import JournalEntry
from accounting.services.balance_service import parse_date
from accounting.services.exceptions import ValidationError

ZERO = Decimal("0.00")

_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def _parse_month(value: str) -> tuple[int, int]:
    match = _MONTH_RE.match((value or "").strip())
    if not match:
        raise ValidationError("month must look like YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError("month must look like YYYY-MM")
    return year, month


def list_entries(
    company,
    *,
    search: str | None = None,
    date_from=None,
    date_to=None,
    month: str | None = None,
    reference: str | None = None,
    activity=None,
    account=None,
):
    qs = JournalEntry.objects.filter(company=company)

    search = (search or "").strip()
    if search:
        qs = qs.filter(
            Q(entry_number__icontains=search)
            | Q(description__icontains=search)
            | Q(reference__icontains=search)
        )

    start = parse_date(date_from, field="date_from")
    end = parse_date(date_to, field="date_to")
    if start is not None:
        qs = qs.filter(entry_date__gte=start)
    if end is not None:
        qs = qs.filter(entry_date__lte=end)

    if month:
        year, month_number = _parse_month(month)
        qs = qs.filter(entry_date__year=year, entry_date__month=month_number)

    reference = (reference or "").strip()
    if reference:
        qs = qs.filter(reference=reference)

    if activity is not None:
        qs = qs.filter(activity=activity)

    if account is not None:
        entry_ids = qs.filter(lines__account=account).values("id")
        qs = JournalEntry.objects.filter(id__in=entry_ids)

    return qs.select_related("activity", "created_by", "reverses").order_by(
        "-entry_date", "-created_at", "-id"
    )


def count_unbalanced_entries(company) -> int:
    """
    Entries whose stored totals disagree with each other or with the sum
    of their lines.
    """
    qs = JournalEntry.objects.filter(company=company).annotate(
        line_debit=Coalesce(Sum("lines__debit_amount"), ZERO),
        line_credit=Coalesce(Sum("lines__credit_amount"), ZERO),
    )
    return qs.filter(
        ~Q(total_debit=F("total_credit"))
        | ~Q(line_debit=F("total_debit"))
        | ~Q(line_credit=F("total_credit"))
    ).count()
