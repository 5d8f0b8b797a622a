# accounting/tests/test_expenses.py

from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from accounting.models import Account, Expense, ExpenseCategoryAccount, JournalEntry, PostingStatus
from accounting.services.account_resolver import check_posting_setup, configure_expense_category
from accounting.services.balance_service import compute_balance
from accounting.services.exceptions import MissingAccountError, ValidationError
from accounting.services.expense_service import post_expense, record_expense
from accounting.services.posting import post_expense_to_ledger
from accounting.tests.helpers import make_company, make_session, seed_chart


class ExpenseRecordingTests(TestCase):
    def setUp(self):
        self.company, self.activity, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user, activity=self.activity)
        self.chart = seed_chart(self.company)

    def test_mapped_category_posts_expense_against_cash(self):
        expense = record_expense(
            self.session,
            title="  March electricity ",
            category="electricite",
            amount="120.456",
            expense_date=date(2026, 3, 10),
        )

        expense.refresh_from_db()
        self.assertEqual(expense.title, "March electricity")
        self.assertEqual(expense.amount, Decimal("120.46"))
        self.assertEqual(expense.posting_status, PostingStatus.POSTED)
        self.assertIsNotNone(expense.posted_at)

        entry = expense.journal_entry
        self.assertEqual(entry.reference, "March electricity")
        lines = {l.account.code: l for l in entry.lines.select_related("account")}
        self.assertEqual(lines["605000"].debit_amount, Decimal("120.46"))
        self.assertEqual(lines["571000"].credit_amount, Decimal("120.46"))
        self.assertEqual(compute_balance(self.chart["571000"]), Decimal("-120.46"))

    def test_bank_payment_source_credits_bank(self):
        expense = record_expense(
            self.session, title="Salaries", category="salaires", amount=900, payment_source="BANK"
        )
        codes = set(expense.journal_entry.lines.values_list("account__code", flat=True))
        self.assertEqual(codes, {"661000", "521000"})

    def test_unmapped_category_keeps_expense_and_marks_failure(self):
        ExpenseCategoryAccount.objects.filter(company=self.company, category="carburant").delete()

        expense = record_expense(self.session, title="Diesel", category="carburant", amount=60)

        expense.refresh_from_db()
        self.assertTrue(Expense.objects.filter(pk=expense.pk).exists())
        self.assertEqual(expense.posting_status, PostingStatus.FAILED)
        self.assertIn("carburant", expense.posting_error)
        self.assertIsNone(expense.journal_entry)
        self.assertFalse(JournalEntry.objects.filter(company=self.company).exists())

        with self.assertRaises(MissingAccountError):
            post_expense_to_ledger(self.session, expense=expense)

    def test_repost_after_mapping_is_fixed(self):
        ExpenseCategoryAccount.objects.filter(company=self.company, category="carburant").delete()
        expense = record_expense(self.session, title="Diesel", category="carburant", amount=60)
        self.assertTrue(expense.posting_failed)

        configure_expense_category(self.session, category="carburant", account=self.chart["618000"])
        self.assertTrue(post_expense(self.session, expense=expense))
        self.assertTrue(post_expense(self.session, expense=expense))

        expense.refresh_from_db()
        self.assertEqual(expense.posting_status, PostingStatus.POSTED)
        self.assertEqual(expense.posting_error, "")
        self.assertEqual(JournalEntry.objects.filter(company=self.company).count(), 1)

    @override_settings(ACCOUNTING_POSTING_ENABLED=False)
    def test_posting_disabled_marks_skipped(self):
        expense = record_expense(self.session, title="Water", category="eau", amount=15)

        expense.refresh_from_db()
        self.assertEqual(expense.posting_status, PostingStatus.SKIPPED)
        self.assertFalse(JournalEntry.objects.filter(company=self.company).exists())

    def test_invalid_payloads_create_nothing(self):
        bad = [
            {"title": " ", "category": "eau", "amount": 10},
            {"title": "Water", "category": "beer", "amount": 10},
            {"title": "Water", "category": "eau", "amount": 0},
            {"title": "Water", "category": "eau", "amount": "ten"},
            {"title": "Water", "category": "eau", "amount": 10, "payment_source": "card"},
            {"title": "Water", "category": "eau", "amount": 10, "expense_date": "10/03/2026"},
        ]
        for payload in bad:
            with self.subTest(payload=payload):
                with self.assertRaises(ValidationError):
                    record_expense(self.session, **payload)

        self.assertFalse(Expense.objects.exists())


class ExpenseCategoryMappingTests(TestCase):
    def setUp(self):
        self.company, self.activity, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user)
        self.chart = seed_chart(self.company)

    def test_seeded_company_has_complete_posting_setup(self):
        self.assertEqual(check_posting_setup(self.company), [])

    def test_setup_check_reports_gaps(self):
        ExpenseCategoryAccount.objects.filter(company=self.company, category="repas").delete()
        self.chart["571000"].is_active = False
        self.chart["571000"].save(update_fields=["is_active"])

        problems = check_posting_setup(self.company)
        self.assertTrue(any(p.startswith("CASH:") for p in problems))
        self.assertIn("expense category repas: no account mapped", problems)

    def test_remap_category(self):
        mapping = configure_expense_category(
            self.session, category="repas", account=self.chart["658000"].id
        )
        self.assertEqual(mapping.account.code, "658000")
        self.assertEqual(
            ExpenseCategoryAccount.objects.filter(company=self.company, category="repas").count(), 1
        )

    def test_mapping_rejects_wrong_targets(self):
        other, _, _, _ = make_company("Other SARL", username="other")
        foreign = Account.objects.create(company=other, code="605000", name="Utilities", account_type=Account.EXPENSE)

        retired = self.chart["624000"]
        retired.is_active = False
        retired.save(update_fields=["is_active"])

        cases = [
            ("repas", self.chart["571000"]),
            ("repas", foreign),
            ("repas", foreign.id),
            ("repas", retired),
            ("unknown", self.chart["658000"]),
            ("repas", "abc"),
        ]
        for category, account in cases:
            with self.subTest(category=category, account=account):
                with self.assertRaises(ValidationError):
                    configure_expense_category(self.session, category=category, account=account)
