# accounting/tests/test_reversal.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.models import JournalEntry
from accounting.services.balance_service import compute_balance
from accounting.services.exceptions import ReversalError
from accounting.services.journal_entry_service import post_entry
from accounting.services.reversal_service import reverse_entry
from accounting.tests.helpers import make_company, make_session, seed_chart


class ReverseEntryTests(TestCase):
    def setUp(self):
        self.company, self.activity, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user, activity=self.activity)
        self.chart = seed_chart(self.company)
        self.cash = self.chart["571000"]
        self.revenue = self.chart["700000"]

        self.entry = post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": 120, "description": "till"},
                {"account": self.revenue, "credit": 120},
            ],
            description="Sale to reverse",
            entry_date=date(2026, 3, 10),
        )

    def test_reversal_mirrors_lines_and_nets_balances_to_zero(self):
        reversal = reverse_entry(self.session, entry=self.entry)

        self.assertEqual(reversal.reverses, self.entry)
        self.assertEqual(reversal.entry_date, self.entry.entry_date)
        self.assertEqual(reversal.reference, self.entry.entry_number)
        self.assertEqual(reversal.description, f"Reversal of {self.entry.entry_number}")
        self.assertEqual(reversal.total_debit, Decimal("120.00"))

        lines = list(reversal.lines.order_by("line_number"))
        self.assertEqual(lines[0].account, self.cash)
        self.assertEqual(lines[0].credit_amount, Decimal("120.00"))
        self.assertEqual(lines[1].account, self.revenue)
        self.assertEqual(lines[1].debit_amount, Decimal("120.00"))

        self.assertEqual(compute_balance(self.cash), Decimal("0.00"))
        self.assertEqual(compute_balance(self.revenue), Decimal("0.00"))

    def test_entry_can_be_reversed_once(self):
        reverse_entry(self.session, entry=self.entry)
        with self.assertRaises(ReversalError):
            reverse_entry(self.session, entry=self.entry)
        self.assertEqual(JournalEntry.objects.count(), 2)

    def test_reversal_cannot_be_reversed(self):
        reversal = reverse_entry(self.session, entry=self.entry)
        with self.assertRaises(ReversalError):
            reverse_entry(self.session, entry=reversal)

    def test_reversal_allowed_after_account_deactivation(self):
        self.revenue.is_active = False
        self.revenue.save(update_fields=["is_active"])

        reversal = reverse_entry(self.session, entry=self.entry, description="Customer returned goods")
        self.assertEqual(reversal.description, "Customer returned goods")

    def test_other_company_cannot_reverse(self):
        other, _, _, _ = make_company("Other SA", username="other")
        with self.assertRaises(ReversalError):
            reverse_entry(make_session(other), entry=self.entry)
