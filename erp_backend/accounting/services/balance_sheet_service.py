# accounting/services/balance_sheet_service.py

"""
BALANCE SHEET SERVICE

Pure accounting read service.

Responsibilities:
- Compute balances per account as at a given date
- Classify balances into Assets, Liabilities, Equity
- Report whether Assets = Liabilities + Equity

Important:
- Revenue/Expense activity is not closed into equity by any posting, so it
  is represented as "Current Period Earnings" in Equity to keep the
  balance sheet correct.
- An empty chart renders empty sections and zero totals.

Contract:
- Amounts are Decimals quantized to cents (the API renders them as numbers)
- Minor-unit ints (exact) are provided next to every total
- liabilities_plus_equity is included in totals for frontend convenience
"""

from __future__ import annotations

import logging
from decimal import Decimal

from accounting.models.account import Account
from accounting.services.balance_service import _q2, _to_minor_int, account_balance_rows, parse_date

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

CURRENT_EARNINGS_CODE = "E-CURR"

SECTION_BY_TYPE = {
    Account.ASSET: "assets",
    Account.LIABILITY: "liabilities",
    Account.EQUITY: "equity",
}


def build_balance_sheet(company, as_of=None) -> dict:
    """
    Returns:
        {
            "as_of": "YYYY-MM-DD" | None,
            "assets": [{"account_id","code","name","balance"}...],
            "liabilities": [...],
            "equity": [...],
            "current_earnings": Decimal,
            "totals": {
                "assets", "liabilities", "equity", "liabilities_plus_equity",
                "<same>_minor", "balanced"
            }
        }
    """
    cutoff = parse_date(as_of, field="as_of")

    sections = {"assets": [], "liabilities": [], "equity": []}
    totals = {"assets": ZERO, "liabilities": ZERO, "equity": ZERO}
    revenue_total = ZERO
    expense_total = ZERO

    for row in account_balance_rows(company=company, end=cutoff, include_zero=False):
        bal = row["balance"]

        if row["account_type"] == Account.REVENUE:
            revenue_total += bal
            continue
        if row["account_type"] == Account.EXPENSE:
            expense_total += bal
            continue

        section = SECTION_BY_TYPE[row["account_type"]]
        sections[section].append(
            {
                "account_id": row["account_id"],
                "code": row["code"],
                "name": row["name"],
                "balance": bal,
            }
        )
        totals[section] += bal

    current_earnings = _q2(revenue_total - expense_total)
    if current_earnings != ZERO:
        sections["equity"].append(
            {
                "account_id": None,
                "code": CURRENT_EARNINGS_CODE,
                "name": "Current Period Earnings",
                "balance": current_earnings,
            }
        )
        totals["equity"] += current_earnings

    assets = _q2(totals["assets"])
    liabilities = _q2(totals["liabilities"])
    equity = _q2(totals["equity"])
    liabilities_plus_equity = _q2(liabilities + equity)

    balanced = _to_minor_int(assets) == _to_minor_int(liabilities_plus_equity)
    if not balanced:
        logger.error(
            "Balance sheet unbalanced company=%s assets=%s liabilities+equity=%s",
            getattr(company, "pk", company),
            assets,
            liabilities_plus_equity,
        )

    return {
        "as_of": cutoff.isoformat() if cutoff else None,
        **sections,
        "current_earnings": current_earnings,
        "totals": {
            "assets": assets,
            "liabilities": liabilities,
            "equity": equity,
            "liabilities_plus_equity": liabilities_plus_equity,
            "assets_minor": _to_minor_int(assets),
            "liabilities_minor": _to_minor_int(liabilities),
            "equity_minor": _to_minor_int(equity),
            "liabilities_plus_equity_minor": _to_minor_int(liabilities_plus_equity),
            "balanced": balanced,
        },
    }
