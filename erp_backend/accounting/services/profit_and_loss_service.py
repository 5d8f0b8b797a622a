# accounting/services/profit_and_loss_service.py

"""
PROFIT & LOSS SERVICE (INCOME STATEMENT)

Read-only aggregation over immutable journal lines.

Contract:
{
  "start_date": "YYYY-MM-DD" | None,
  "end_date": "YYYY-MM-DD" | None,
  "revenue": [{"account_id","code","name","balance"}...],
  "expenses": [...],
  "totals": {"revenue","expenses","revenue_minor","expenses_minor"},
  "net": Decimal,
  "net_minor": int
}

Key rules:
- Uses JournalEntry.entry_date as the accounting effective date (inclusive range)
- net = sum(revenue balances) - sum(expense balances)
- An empty chart renders empty lists and zero totals
"""

from __future__ import annotations

from decimal import Decimal

from accounting.models.account import Account
from accounting.services.balance_service import (
    BalanceServiceError,
    _q2,
    _to_minor_int,
    account_balance_rows,
    parse_date,
)

ZERO = Decimal("0.00")


def build_profit_and_loss(company, start=None, end=None) -> dict:
    start_d = parse_date(start, field="start_date")
    end_d = parse_date(end, field="end_date")
    if start_d and end_d and start_d > end_d:
        raise BalanceServiceError("start_date must be on or before end_date")

    revenue: list[dict] = []
    expenses: list[dict] = []

    for row in account_balance_rows(company=company, start=start_d, end=end_d, include_zero=False):
        item = {
            "account_id": row["account_id"],
            "code": row["code"],
            "name": row["name"],
            "balance": row["balance"],
        }
        if row["account_type"] == Account.REVENUE:
            revenue.append(item)
        elif row["account_type"] == Account.EXPENSE:
            expenses.append(item)

    total_revenue = _q2(sum((r["balance"] for r in revenue), ZERO))
    total_expenses = _q2(sum((e["balance"] for e in expenses), ZERO))
    net = _q2(total_revenue - total_expenses)

    return {
        "start_date": start_d.isoformat() if start_d else None,
        "end_date": end_d.isoformat() if end_d else None,
        "revenue": revenue,
        "expenses": expenses,
        "totals": {
            "revenue": total_revenue,
            "expenses": total_expenses,
            "revenue_minor": _to_minor_int(total_revenue),
            "expenses_minor": _to_minor_int(total_expenses),
        },
        "net": net,
        "net_minor": _to_minor_int(net),
    }
