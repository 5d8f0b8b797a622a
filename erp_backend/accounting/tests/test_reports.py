# accounting/tests/test_reports.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.db.models import Sum
from django.test import TestCase

from accounting.models import Account, JournalEntryLine
from accounting.services.balance_service import BalanceServiceError, compute_balance, get_trial_balance
from accounting.services.balance_sheet_service import CURRENT_EARNINGS_CODE, build_balance_sheet
from accounting.services.journal_entry_service import post_entry
from accounting.services.journal_query_service import count_unbalanced_entries, list_entries
from accounting.services.exceptions import ValidationError
from accounting.services.overview_service import get_accounting_overview
from accounting.services.profit_and_loss_service import build_profit_and_loss
from accounting.tests.helpers import make_company, make_session, seed_chart


class EmptyChartReportTests(TestCase):
    def setUp(self):
        self.company, _, _, _ = make_company()

    def test_reports_render_zeros_on_empty_chart(self):
        pnl = build_profit_and_loss(self.company)
        self.assertEqual(pnl["revenue"], [])
        self.assertEqual(pnl["expenses"], [])
        self.assertEqual(pnl["net"], Decimal("0.00"))

        sheet = build_balance_sheet(self.company)
        self.assertEqual(sheet["assets"], [])
        self.assertEqual(sheet["liabilities"], [])
        self.assertEqual(sheet["totals"]["assets"], Decimal("0.00"))
        self.assertTrue(sheet["totals"]["balanced"])

        trial = get_trial_balance(self.company)
        self.assertEqual(trial["accounts"], [])
        self.assertTrue(trial["totals"]["balanced"])

        overview = get_accounting_overview(self.company, today=date(2026, 5, 1))
        self.assertEqual(overview["account_count"], 0)
        self.assertEqual(overview["unbalanced_entries"], 0)


class LedgerReportTests(TestCase):
    def setUp(self):
        self.company, self.activity, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user, activity=self.activity)
        self.chart = seed_chart(self.company)

        cash = self.chart["571000"]
        capital = self.chart["101000"]
        revenue = self.chart["700000"]
        cogs = self.chart["603000"]
        inventory = self.chart["371000"]
        utilities = self.chart["605000"]

        self._post(date(2026, 1, 5), "Capital contribution", [(cash, 1000, 0), (capital, 0, 1000)])
        self._post(date(2026, 1, 15), "Stock purchase", [(inventory, 400, 0), (cash, 0, 400)])
        self._post(date(2026, 2, 3), "Sale", [(cash, 650, 0), (revenue, 0, 650)])
        self._post(date(2026, 2, 3), "Cost of sale", [(cogs, 260, 0), (inventory, 0, 260)])
        self._post(date(2026, 2, 20), "Electricity", [(utilities, 75.5, 0), (cash, 0, 75.5)])
        self._post(date(2026, 3, 2), "March sale", [(cash, 100, 0), (revenue, 0, 100)])

    def _post(self, entry_date, description, legs):
        return post_entry(
            self.session,
            lines=[{"account": a, "debit": d, "credit": c} for a, d, c in legs],
            description=description,
            entry_date=entry_date,
            reference=description.upper()[:20],
        )

    def _raw_net(self, start=None, end=None):
        qs = JournalEntryLine.objects.filter(journal_entry__company=self.company)
        if start:
            qs = qs.filter(journal_entry__entry_date__gte=start)
        if end:
            qs = qs.filter(journal_entry__entry_date__lte=end)

        def side(account_type, field):
            return qs.filter(account__account_type=account_type).aggregate(s=Sum(field))["s"] or Decimal("0")

        revenue = side(Account.REVENUE, "credit_amount") - side(Account.REVENUE, "debit_amount")
        expenses = side(Account.EXPENSE, "debit_amount") - side(Account.EXPENSE, "credit_amount")
        return revenue - expenses

    def test_compute_balance_respects_cutoff(self):
        cash = self.chart["571000"]
        self.assertEqual(compute_balance(cash), Decimal("1274.50"))
        self.assertEqual(compute_balance(cash, as_of=date(2026, 1, 31)), Decimal("600.00"))
        self.assertEqual(compute_balance(self.chart["700000"]), Decimal("750.00"))

    def test_compute_balance_by_activity(self):
        cash = self.chart["571000"]
        self.assertEqual(compute_balance(cash, activity=self.activity), Decimal("1274.50"))

    def test_profit_and_loss_net_matches_raw_lines(self):
        pnl = build_profit_and_loss(self.company)
        self.assertEqual(pnl["net"], self._raw_net())
        self.assertEqual(pnl["net"], Decimal("414.50"))
        self.assertEqual(pnl["totals"]["revenue"], Decimal("750.00"))
        self.assertEqual(pnl["totals"]["expenses"], Decimal("335.50"))
        self.assertEqual(pnl["net_minor"], 41450)

        feb = build_profit_and_loss(self.company, start="2026-02-01", end="2026-02-28")
        self.assertEqual(feb["net"], self._raw_net(date(2026, 2, 1), date(2026, 2, 28)))
        self.assertEqual([r["code"] for r in feb["revenue"]], ["700000"])

    def test_profit_and_loss_rejects_inverted_range(self):
        with self.assertRaises(BalanceServiceError):
            build_profit_and_loss(self.company, start="2026-03-01", end="2026-02-01")
        with self.assertRaises(ValidationError):
            build_profit_and_loss(self.company, start="March")

    def test_balance_sheet_balances_with_current_earnings(self):
        sheet = build_balance_sheet(self.company)

        self.assertTrue(sheet["totals"]["balanced"])
        self.assertEqual(sheet["current_earnings"], Decimal("414.50"))
        self.assertEqual(sheet["totals"]["assets"], Decimal("1414.50"))
        self.assertEqual(sheet["totals"]["liabilities_plus_equity"], Decimal("1414.50"))
        self.assertIn(CURRENT_EARNINGS_CODE, [r["code"] for r in sheet["equity"]])

        asset_codes = [r["code"] for r in sheet["assets"]]
        self.assertEqual(asset_codes, ["371000", "571000"])

    def test_inactive_account_with_balance_still_reported(self):
        utilities = self.chart["605000"]
        utilities.is_active = False
        utilities.save(update_fields=["is_active"])

        pnl = build_profit_and_loss(self.company)
        self.assertIn("605000", [e["code"] for e in pnl["expenses"]])

        trial = get_trial_balance(self.company)
        codes = [r["code"] for r in trial["accounts"]]
        self.assertIn("605000", codes)
        # inactive and empty: hidden
        self.chart["606000"].is_active = False
        self.chart["606000"].save(update_fields=["is_active"])
        codes = [r["code"] for r in get_trial_balance(self.company)["accounts"]]
        self.assertNotIn("606000", codes)

    def test_trial_balance_is_zero_filled_and_balanced(self):
        trial = get_trial_balance(self.company, as_of=date(2026, 2, 28))

        self.assertTrue(trial["totals"]["balanced"])
        self.assertEqual(trial["totals"]["debit"], trial["totals"]["credit"])
        self.assertEqual(len(trial["accounts"]), Account.objects.filter(company=self.company).count())

        by_code = {r["code"]: r for r in trial["accounts"]}
        self.assertEqual(by_code["700000"]["balance"], Decimal("650.00"))
        self.assertEqual(by_code["521000"]["balance"], Decimal("0.00"))

    def test_overview_counts(self):
        overview = get_accounting_overview(self.company, today=date(2026, 3, 31))

        self.assertEqual(overview["entries_this_month"], 1)
        self.assertEqual(overview["revenue_total"], Decimal("750.00"))
        self.assertEqual(overview["net_result"], Decimal("414.50"))
        self.assertEqual(overview["unbalanced_entries"], 0)

    def test_count_unbalanced_entries_detects_tampered_lines(self):
        self.assertEqual(count_unbalanced_entries(self.company), 0)

        line = JournalEntryLine.objects.filter(
            journal_entry__company=self.company, debit_amount__gt=0
        ).first()
        JournalEntryLine.objects.filter(pk=line.pk).update(debit_amount=line.debit_amount + 1)

        self.assertEqual(count_unbalanced_entries(self.company), 1)

    def test_list_entries_filters(self):
        self.assertEqual(list_entries(self.company).count(), 6)
        self.assertEqual(list_entries(self.company, month="2026-02").count(), 3)
        self.assertEqual(list_entries(self.company, search="sale").count(), 3)
        self.assertEqual(list_entries(self.company, reference="SALE").count(), 1)
        self.assertEqual(
            list_entries(self.company, date_from=date(2026, 2, 1), date_to=date(2026, 2, 10)).count(), 2
        )
        self.assertEqual(list_entries(self.company, account=self.chart["605000"].id).count(), 1)

        newest = list_entries(self.company).first()
        self.assertEqual(newest.entry_date, date(2026, 3, 2))

        with self.assertRaises(ValidationError):
            list(list_entries(self.company, month="02/2026"))
