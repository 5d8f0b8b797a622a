# accounting/services/posting.py

"""
======================================================
PATH: accounting/services/posting.py
======================================================
POSTING ADAPTER

Resolve accounts, build lines (posting_rules) and call post_entry (the engine).

This module should remain a thin adapter:
- It DOES NOT do workflows (sale/purchase/expense services do).
- It DOES map business events -> accounting lines.
- It ALWAYS calls post_entry with a deterministic idempotency key,
  so a retried posting returns the entry created the first time.

Best-effort linkage (post_business_event):
- The business record is already committed when posting starts.
- A posting failure is logged, stored on the record (posting_status=FAILED)
  and reported to the caller; it never rolls the record back.
- With ACCOUNTING_POSTING_ENABLED off, records are marked SKIPPED.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

from django.conf import settings
from django.db import DatabaseError, transaction

from accounting.services import account_resolver
from accounting.services.exceptions import AccountingServiceError
from accounting.services.journal_entry_service import post_entry
from accounting.services.posting_rules import (
    build_cogs_lines,
    build_expense_lines,
    build_manual_lines,
    build_purchase_lines,
    build_sale_lines,
)

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    if v is None or v == "":
        return Decimal("0.00")
    return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def posting_enabled() -> bool:
    return bool(getattr(settings, "ACCOUNTING_POSTING_ENABLED", True))


# ============================================================
# SALES
# ============================================================


def _sale_debit_account(*, company, sale):
    """
    Paid sales settle in cash. Delivered-but-unpaid sales flagged on_credit
    sit in receivables; otherwise cash is assumed, as at the counter.
    """
    status = (getattr(sale, "status", "") or "").lower()
    if status != "paid" and getattr(sale, "on_credit", False):
        return account_resolver.get_receivable_account(company)
    return account_resolver.get_cash_account(company)


def post_sale_to_ledger(session, *, sale):
    company = session.company
    lines = build_sale_lines(
        amount=sale.total_amount,
        debit_account=_sale_debit_account(company=company, sale=sale),
        revenue_account=account_resolver.get_sales_revenue_account(company),
        description=f"Sale {sale.sale_number}",
    )
    return post_entry(
        session,
        lines=lines,
        description=f"Sale {sale.sale_number}",
        entry_date=sale.sale_date,
        reference=sale.sale_number,
        idempotency_key=f"SALE:{sale.pk}",
        activity=getattr(sale, "activity", None),
    )


def sale_cost_total(sale) -> Decimal:
    total = Decimal("0.00")
    for item in sale.items.all():
        total += _money(item.unit_cost) * Decimal(item.quantity)
    return _money(total)


def post_sale_cogs_to_ledger(session, *, sale):
    """
    Cost side of a sale, from the unit cost captured on each item.
    Returns None when the sale carries no cost (nothing to post).
    """
    cost = sale_cost_total(sale)
    if cost <= Decimal("0.00"):
        return None

    company = session.company
    lines = build_cogs_lines(
        cost=cost,
        cogs_account=account_resolver.get_cogs_account(company),
        inventory_account=account_resolver.get_inventory_account(company),
        description=f"Cost of sale {sale.sale_number}",
    )
    return post_entry(
        session,
        lines=lines,
        description=f"Cost of goods sold - {sale.sale_number}",
        entry_date=sale.sale_date,
        reference=sale.sale_number,
        idempotency_key=f"SALE-COGS:{sale.pk}",
        activity=getattr(sale, "activity", None),
    )


# ============================================================
# PURCHASES
# ============================================================


def post_purchase_to_ledger(session, *, purchase):
    company = session.company
    status = (getattr(purchase, "status", "") or "").lower()
    if status != "paid" and getattr(purchase, "on_credit", False):
        credit_account = account_resolver.get_payable_account(company)
    else:
        credit_account = account_resolver.get_cash_account(company)

    lines = build_purchase_lines(
        amount=purchase.total_amount,
        inventory_account=account_resolver.get_inventory_account(company),
        credit_account=credit_account,
        description=f"Purchase {purchase.purchase_number}",
    )
    return post_entry(
        session,
        lines=lines,
        description=f"Purchase {purchase.purchase_number}",
        entry_date=purchase.purchase_date,
        reference=purchase.purchase_number,
        idempotency_key=f"PURCHASE:{purchase.pk}",
        activity=getattr(purchase, "activity", None),
    )


# ============================================================
# EXPENSES
# ============================================================


def post_expense_to_ledger(session, *, expense):
    company = session.company
    expense_account = account_resolver.get_expense_category_account(company, expense.category)

    if expense.payment_source == "bank":
        payment_account = account_resolver.get_bank_account(company)
    else:
        payment_account = account_resolver.get_cash_account(company)

    lines = build_expense_lines(
        amount=expense.amount,
        expense_account=expense_account,
        payment_account=payment_account,
        description=expense.title,
    )
    return post_entry(
        session,
        lines=lines,
        description=f"Expense - {expense.title}",
        entry_date=expense.expense_date,
        reference=expense.title[:100],
        idempotency_key=f"EXPENSE:{expense.pk}",
        activity=getattr(expense, "activity", None),
    )


# ============================================================
# MANUAL ENTRIES
# ============================================================


def post_manual_entry(
    session,
    *,
    rows,
    description: str,
    entry_date=None,
    reference: str = "",
    idempotency_key: str | None = None,
):
    return post_entry(
        session,
        lines=build_manual_lines(rows),
        description=description,
        entry_date=entry_date,
        reference=reference,
        idempotency_key=idempotency_key,
    )


# ============================================================
# BEST-EFFORT LINKAGE
# ============================================================


def post_business_event(record, *, kind: str, post: Callable[[], None]) -> bool:
    """
    Run `post` for an already-committed business record and store the outcome.

    Returns True when posted. On failure the record is marked FAILED with
    the error text and False is returned; the exception is logged, not raised.
    """
    if not posting_enabled():
        record.mark_posting_skipped()
        logger.info("Accounting posting disabled; skipped %s %s", kind, record.pk)
        return False

    try:
        with transaction.atomic():
            post()
    except (AccountingServiceError, DatabaseError) as exc:
        logger.exception("Accounting posting failed for %s %s", kind, record.pk)
        record.mark_posting_failed(str(exc))
        return False

    record.mark_posted()
    return True
