# accounting/tests/test_chart.py

from __future__ import annotations

from django.db import IntegrityError, transaction
from django.test import TestCase

from accounting.models import Account
from accounting.services import chart_service
from accounting.services.exceptions import (
    DuplicateCodeError,
    HierarchyCycleError,
    ValidationError,
)
from accounting.services.journal_entry_service import post_entry
from accounting.tests.helpers import make_company, make_session


class ChartOfAccountsTests(TestCase):
    """
    GUARANTEES:
    - Codes are unique per company (service check + DB constraint)
    - Parent assignment never creates a cycle
    - Referenced accounts are deactivated, never deleted
    """

    def setUp(self):
        self.company, _, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user)

    def _create(self, code, name, account_type, parent=None):
        return chart_service.create_account(
            self.session, code=code, name=name, account_type=account_type, parent=parent
        )

    def test_create_account_trims_and_normalizes_type(self):
        account = self._create("  571000 ", " Cash ", "asset")
        self.assertEqual(account.code, "571000")
        self.assertEqual(account.name, "Cash")
        self.assertEqual(account.account_type, Account.ASSET)
        self.assertTrue(account.is_active)

    def test_blank_code_or_name_is_rejected(self):
        with self.assertRaises(ValidationError):
            self._create("", "Cash", "ASSET")
        with self.assertRaises(ValidationError):
            self._create("571000", "  ", "ASSET")
        with self.assertRaises(ValidationError):
            self._create("571000", "Cash", "INCOME")
        self.assertEqual(Account.objects.count(), 0)

    def test_duplicate_code_is_rejected_per_company(self):
        self._create("571000", "Cash", "ASSET")
        with self.assertRaises(DuplicateCodeError):
            self._create("571000", "Cash again", "ASSET")

        other, _, _, _ = make_company("Other SA", username="other")
        chart_service.create_account(
            make_session(other), code="571000", name="Cash", account_type="ASSET"
        )
        self.assertEqual(Account.objects.filter(code="571000").count(), 2)

    def test_database_rejects_duplicate_code(self):
        self._create("571000", "Cash", "ASSET")
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Account.objects.bulk_create(
                    [Account(company=self.company, code="571000", name="Dup", account_type="ASSET")]
                )

    def test_parent_cycle_is_rejected(self):
        root = self._create("6", "Expenses", "EXPENSE")
        mid = self._create("60", "Purchases", "EXPENSE", parent=root)
        leaf = self._create("603", "COGS", "EXPENSE", parent=mid)

        with self.assertRaises(HierarchyCycleError):
            chart_service.set_account_parent(self.session, account=root, parent=leaf)
        with self.assertRaises(HierarchyCycleError):
            chart_service.update_account(self.session, account=mid, parent=mid.pk)

        root.refresh_from_db()
        self.assertIsNone(root.parent_id)

    def test_parent_from_other_company_is_rejected(self):
        other, _, _, _ = make_company("Other SA", username="other")
        foreign = chart_service.create_account(
            make_session(other), code="6", name="Expenses", account_type="EXPENSE"
        )
        with self.assertRaises(ValidationError):
            self._create("603", "COGS", "EXPENSE", parent=foreign)

    def test_delete_unreferenced_account(self):
        account = self._create("658000", "Other expenses", "EXPENSE")
        outcome = chart_service.delete_account(self.session, account=account)

        self.assertEqual(outcome, chart_service.DELETED)
        self.assertFalse(Account.objects.filter(pk=account.pk).exists())

    def test_delete_referenced_account_deactivates_it(self):
        cash = self._create("571000", "Cash", "ASSET")
        revenue = self._create("700000", "Sales", "REVENUE")
        post_entry(
            self.session,
            lines=[{"account": cash, "debit": 10}, {"account": revenue, "credit": 10}],
            description="Reference the accounts",
        )

        outcome = chart_service.delete_account(self.session, account=cash)

        self.assertEqual(outcome, chart_service.DEACTIVATED)
        cash.refresh_from_db()
        self.assertFalse(cash.is_active)
        self.assertEqual(cash.journal_lines.count(), 1)

    def test_deactivate_and_reactivate(self):
        account = self._create("571000", "Cash", "ASSET")
        chart_service.deactivate_account(self.session, account=account)
        self.assertFalse(Account.objects.get(pk=account.pk).is_active)

        chart_service.reactivate_account(self.session, account=account)
        self.assertTrue(Account.objects.get(pk=account.pk).is_active)

    def test_list_accounts_filters_and_orders_by_code(self):
        self._create("700000", "Sales of goods", "REVENUE")
        self._create("571000", "Cash", "ASSET")
        bank = self._create("521000", "Bank", "ASSET")
        chart_service.deactivate_account(self.session, account=bank)

        codes = list(chart_service.list_accounts(self.company).values_list("code", flat=True))
        self.assertEqual(codes, ["521000", "571000", "700000"])

        assets = chart_service.list_accounts(self.company, account_type="asset", active_only=True)
        self.assertEqual([a.code for a in assets], ["571000"])

        found = chart_service.list_accounts(self.company, search="SALES")
        self.assertEqual([a.code for a in found], ["700000"])
