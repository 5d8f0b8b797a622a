# PATH: accounting/services/expense_service.py

"""
EXPENSE SERVICE

Responsibilities:
- Validate expense payload
- Create the Expense business record (committed on its own)
- Post the journal entry best-effort (posting.post_business_event)

Accounting Effect:
- Dr <account mapped to the expense category>
- Cr Cash / Bank

A posting failure (e.g. category with no mapped account) leaves the
expense in place with posting_status=FAILED and the error text.
"""

from __future__ import annotations

import logging
from datetime import date as date_type
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from accounting.expense_categories import CATEGORY_CODES
from accounting.models.expense import Expense
from accounting.services.exceptions import ValidationError
from accounting.services.posting import post_business_event, post_expense_to_ledger

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    try:
        return Decimal(str(v if v not in (None, "") else "0.00")).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(f"Invalid amount: {v!r}") from exc


def _normalize_expense_date(expense_date) -> date_type:
    if expense_date is None or expense_date == "":
        return timezone.localdate()
    if isinstance(expense_date, date_type):
        return expense_date
    try:
        return date_type.fromisoformat(str(expense_date).strip())
    except ValueError as exc:
        raise ValidationError("expense_date must be a date (YYYY-MM-DD)") from exc


def _create_expense(session, **fields) -> Expense:
    try:
        with transaction.atomic():
            return Expense.objects.create(
                company=session.company,
                activity=session.activity,
                created_by=session.user if getattr(session.user, "is_authenticated", False) else None,
                **fields,
            )
    except DjangoValidationError as exc:
        raise ValidationError("; ".join(exc.messages)) from exc


def post_expense(session, *, expense: Expense) -> bool:
    """
    (Re)post an expense. Safe to call again after a failure: the
    EXPENSE:<id> idempotency key returns the existing entry if one exists.
    """

    def _post():
        entry = post_expense_to_ledger(session, expense=expense)
        Expense.objects.filter(pk=expense.pk).update(journal_entry=entry)
        expense.journal_entry = entry

    return post_business_event(expense, kind="expense", post=_post)


def record_expense(
    session,
    *,
    title: str,
    category: str,
    amount,
    expense_date=None,
    payment_source: str = Expense.PAYMENT_CASH,
    description: str = "",
) -> Expense:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Expense title is required")

    category = (category or "").strip()
    if category not in CATEGORY_CODES:
        raise ValidationError(f"Unknown expense category '{category}'")

    amt = _money(amount)
    if amt <= Decimal("0.00"):
        raise ValidationError("Amount must be > 0")

    payment_source = (payment_source or Expense.PAYMENT_CASH).strip().lower()
    if payment_source not in (Expense.PAYMENT_CASH, Expense.PAYMENT_BANK):
        raise ValidationError("Invalid payment_source. Use 'cash' or 'bank'.")

    expense = _create_expense(
        session,
        title=title,
        description=(description or "").strip(),
        category=category,
        amount=amt,
        expense_date=_normalize_expense_date(expense_date),
        payment_source=payment_source,
    )
    logger.info(
        "Recorded expense %s amount=%s category=%s company=%s",
        expense.pk,
        amt,
        category,
        session.company_id,
    )

    post_expense(session, expense=expense)
    return expense
