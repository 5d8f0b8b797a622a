# accounting/services/posting_rules.py

"""
POSTING RULES (PURE)

Deterministic translators from a business event to journal lines.

This module:
- DOES define which accounts are debited and credited
- DOES NOT resolve accounts (callers pass them in)
- DOES NOT save anything

Rules:
- Sale:      Dr Cash / Receivable      Cr Sales revenue
- COGS:      Dr Cost of goods sold     Cr Inventory
- Purchase:  Dr Inventory              Cr Cash / Payable
- Expense:   Dr Category expense       Cr Cash / Bank
- Manual:    user-supplied rows, passed through as line inputs
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from accounting.services.exceptions import ValidationError, ZeroAmountError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(v) -> Decimal:
    if v is None or v == "":
        return ZERO
    try:
        return Decimal(str(v)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(f"Invalid money value: {v!r}") from exc


def _two_leg(*, amount, debit_account, credit_account, what: str, description: str = "") -> list[dict]:
    amt = _money(amount)
    if amt <= ZERO:
        raise ZeroAmountError(f"{what} amount must be greater than zero (got {amt})")

    return [
        {"account": debit_account, "debit": amt, "credit": ZERO, "description": description},
        {"account": credit_account, "debit": ZERO, "credit": amt, "description": description},
    ]


def build_sale_lines(*, amount, debit_account, revenue_account, description: str = "") -> list[dict]:
    return _two_leg(
        amount=amount,
        debit_account=debit_account,
        credit_account=revenue_account,
        what="Sale",
        description=description,
    )


def build_cogs_lines(*, cost, cogs_account, inventory_account, description: str = "") -> list[dict]:
    return _two_leg(
        amount=cost,
        debit_account=cogs_account,
        credit_account=inventory_account,
        what="Cost of goods sold",
        description=description,
    )


def build_purchase_lines(*, amount, inventory_account, credit_account, description: str = "") -> list[dict]:
    return _two_leg(
        amount=amount,
        debit_account=inventory_account,
        credit_account=credit_account,
        what="Purchase",
        description=description,
    )


def build_expense_lines(*, amount, expense_account, payment_account, description: str = "") -> list[dict]:
    return _two_leg(
        amount=amount,
        debit_account=expense_account,
        credit_account=payment_account,
        what="Expense",
        description=description,
    )


def build_manual_lines(rows) -> list[dict]:
    """
    Shape entry-form rows into line inputs. Accepts either debit/credit or
    debit_amount/credit_amount keys and account or account_id.

    No coercion happens here: a row with both sides filled stays that way
    so post_entry can reject it with the row's number. A row that is not an
    object is rejected here, with its number.
    """
    if isinstance(rows, (str, bytes, dict)):
        raise ValidationError("lines must be a list of line objects")

    lines: list[dict] = []
    for row_number, row in enumerate(rows or [], start=1):
        if not isinstance(row, dict):
            raise ValidationError("each line must be an object", line_number=row_number)

        account = row.get("account")
        if account in (None, ""):
            account = row.get("account_id")

        debit = row.get("debit", row.get("debit_amount"))
        credit = row.get("credit", row.get("credit_amount"))

        lines.append(
            {
                "account": account if account != "" else None,
                "debit": debit,
                "credit": credit,
                "description": row.get("description") or "",
            }
        )
    return lines
