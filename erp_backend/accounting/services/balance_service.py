# accounting/services/balance_service.py

"""
BALANCE SERVICE (AUTHORITATIVE)

Read-only ledger aggregation helpers.

RULES:
- READ-ONLY: no writes, ever
- JournalEntryLine is the single source of truth; balances are computed on
  query, so they always reflect the committed ledger
- Accounting timeline uses JournalEntry.entry_date (not created_at)
- Company-scoped: never mix tenants
- Inactive accounts keep their history and still count in balances

Sign convention:
- ASSET, EXPENSE                 -> debit - credit
- LIABILITY, EQUITY, REVENUE     -> credit - debit
"""

from __future__ import annotations

from datetime import date as date_cls
from decimal import ROUND_HALF_UP, Decimal

from django.db.models import Sum
from django.db.models.functions import Coalesce

from accounting.models.account import Account
from accounting.models.journal_line import JournalEntryLine
from accounting.services.exceptions import AccountingServiceError, ValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")


class BalanceServiceError(AccountingServiceError):
    """Base error for balance and reporting services."""


def _q2(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _to_minor_int(amount: Decimal) -> int:
    return int((_q2(amount) * 100).to_integral_value(rounding=ROUND_HALF_UP))


def parse_date(value, *, field: str = "date") -> date_cls | None:
    if value is None or value == "":
        return None
    if isinstance(value, date_cls):
        return value
    try:
        return date_cls.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"Invalid {field} format (YYYY-MM-DD)") from exc


def signed_balance(account_type: str, debit, credit) -> Decimal:
    if account_type in Account.DEBIT_NORMAL_TYPES:
        return _q2(_q2(debit) - _q2(credit))
    return _q2(_q2(credit) - _q2(debit))


def _lines_qs(*, company, start=None, end=None, activity=None):
    qs = JournalEntryLine.objects.filter(journal_entry__company=company)

    start = parse_date(start, field="start_date")
    end = parse_date(end, field="as_of")
    if start is not None:
        qs = qs.filter(journal_entry__entry_date__gte=start)
    if end is not None:
        qs = qs.filter(journal_entry__entry_date__lte=end)
    if activity is not None:
        qs = qs.filter(journal_entry__activity=activity)

    return qs


def account_totals(*, company, start=None, end=None, activity=None) -> dict[int, tuple[Decimal, Decimal]]:
    """
    {account_id: (debit_total, credit_total)} in one aggregate query (no N+1).
    Accounts without lines in the window are absent.
    """
    rows = (
        _lines_qs(company=company, start=start, end=end, activity=activity)
        .values("account_id")
        .annotate(
            debit_total=Coalesce(Sum("debit_amount"), ZERO),
            credit_total=Coalesce(Sum("credit_amount"), ZERO),
        )
    )
    return {r["account_id"]: (_q2(r["debit_total"]), _q2(r["credit_total"])) for r in rows}


def compute_balance(account: Account, as_of=None, activity=None) -> Decimal:
    """
    Signed balance of one account up to and including `as_of` (entry date).
    """
    if account is None:
        raise BalanceServiceError("Account is required")

    qs = _lines_qs(company=account.company_id, end=as_of, activity=activity).filter(account=account)
    aggregates = qs.aggregate(
        debit_total=Coalesce(Sum("debit_amount"), ZERO),
        credit_total=Coalesce(Sum("credit_amount"), ZERO),
    )
    return signed_balance(account.account_type, aggregates["debit_total"], aggregates["credit_total"])


def account_balance_rows(*, company, start=None, end=None, activity=None, include_zero: bool = True) -> list[dict]:
    """
    One row per account, ordered by code. Inactive accounts are listed only
    when they carry a non-zero balance.
    """
    if company is None:
        raise BalanceServiceError("Company is required")

    totals = account_totals(company=company, start=start, end=end, activity=activity)
    accounts = (
        Account.objects.filter(company=company)
        .only("id", "code", "name", "account_type", "is_active")
        .order_by("code")
    )

    rows = []
    for acc in accounts:
        debit, credit = totals.get(acc.id, (ZERO, ZERO))
        balance = signed_balance(acc.account_type, debit, credit)

        if balance == ZERO and not acc.is_active:
            continue
        if balance == ZERO and not include_zero:
            continue

        rows.append(
            {
                "account_id": acc.id,
                "code": acc.code,
                "name": acc.name,
                "account_type": acc.account_type,
                "is_active": acc.is_active,
                "debit_total": debit,
                "credit_total": credit,
                "balance": balance,
            }
        )
    return rows


def get_trial_balance(company, as_of=None) -> dict:
    """
    Trial balance ("balance générale") as at `as_of`, zero-filled for
    every active account. total_debit == total_credit in a healthy ledger.
    """
    rows = account_balance_rows(company=company, end=as_of)

    total_debit = _q2(sum((r["debit_total"] for r in rows), ZERO))
    total_credit = _q2(sum((r["credit_total"] for r in rows), ZERO))

    as_of_date = parse_date(as_of, field="as_of")
    return {
        "as_of": as_of_date.isoformat() if as_of_date else None,
        "accounts": rows,
        "totals": {
            "debit": total_debit,
            "credit": total_credit,
            "debit_minor": _to_minor_int(total_debit),
            "credit_minor": _to_minor_int(total_credit),
            "balanced": _to_minor_int(total_debit) == _to_minor_int(total_credit),
        },
    }


def get_totals_by_account_type(*, company, start=None, end=None) -> dict[str, Decimal]:
    totals = {value: ZERO for value, _label in Account.ACCOUNT_TYPES}
    for row in account_balance_rows(company=company, start=start, end=end):
        totals[row["account_type"]] = _q2(totals[row["account_type"]] + row["balance"])
    return totals
