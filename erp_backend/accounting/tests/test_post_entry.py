# accounting/tests/test_post_entry.py

from __future__ import annotations

import warnings
from decimal import Decimal
from unittest import mock

from django.core.exceptions import ValidationError as DjangoValidationError
from django.test import TestCase

from accounting.models import Account, JournalEntry, JournalEntryLine
from accounting.services.exceptions import (
    EmptyLineError,
    EntryNumberingError,
    IdempotencyError,
    InactiveAccountError,
    InsufficientLinesError,
    MixedLineError,
    NumberingFallbackWarning,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
    ZeroAmountError,
)
from accounting.services.journal_entry_service import post_entry
from accounting.services.posting import post_manual_entry
from accounting.tests.helpers import make_company, make_session, seed_chart


class PostEntryTests(TestCase):
    """
    GUARANTEES:
    - Accepted entries balance and every line has exactly one side
    - Rejected entries leave no header and no line rows
    - Errors name the offending line and rule
    """

    def setUp(self):
        self.company, self.activity, self.user, _ = make_company()
        self.session = make_session(self.company, user=self.user, activity=self.activity)
        self.chart = seed_chart(self.company)
        self.cash = self.chart["571000"]
        self.revenue = self.chart["700000"]

    def _assert_nothing_written(self):
        self.assertEqual(JournalEntry.objects.count(), 0)
        self.assertEqual(JournalEntryLine.objects.count(), 0)

    # =====================================================
    # ACCEPTED ENTRIES
    # =====================================================

    def test_balanced_two_line_entry_is_persisted(self):
        entry = post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": 100, "credit": 0},
                {"account": self.revenue, "debit": 0, "credit": 100},
            ],
            description="Cash sale",
        )

        self.assertEqual(entry.total_debit, Decimal("100.00"))
        self.assertEqual(entry.total_credit, Decimal("100.00"))
        self.assertEqual(entry.lines.count(), 2)
        self.assertEqual(entry.entry_number, "ECR-000001")
        self.assertFalse(entry.numbering_fallback)
        self.assertEqual(entry.activity, self.activity)
        self.assertEqual(entry.created_by, self.user)

        for line in entry.lines.all():
            self.assertTrue((line.debit_amount > 0) != (line.credit_amount > 0))

    def test_entry_numbers_increase_per_company(self):
        lines = [
            {"account_id": self.cash.id, "debit": "10", "credit": "0"},
            {"account_id": self.revenue.id, "debit": "0", "credit": "10"},
        ]
        first = post_entry(self.session, lines=lines, description="one")
        second = post_entry(self.session, lines=lines, description="two")

        other, _, _, _ = make_company("Other SA", username="other")
        other_chart = seed_chart(other)
        other_entry = post_entry(
            make_session(other),
            lines=[
                {"account": other_chart["571000"], "debit": 5},
                {"account": other_chart["700000"], "credit": 5},
            ],
            description="other company",
        )

        self.assertEqual(first.entry_number, "ECR-000001")
        self.assertEqual(second.entry_number, "ECR-000002")
        self.assertEqual(other_entry.entry_number, "ECR-000001")

    def test_blank_rows_are_dropped_before_counting(self):
        entry = post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": 40},
                {"account": None, "debit": 0, "credit": 0},
                {"account": self.revenue, "credit": 40},
            ],
            description="With a blank form row",
        )
        self.assertEqual(entry.lines.count(), 2)
        self.assertEqual(
            list(entry.lines.values_list("line_number", flat=True)), [1, 2]
        )

    def test_sub_cent_difference_is_rounded_to_balance(self):
        entry = post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": "33.333"},
                {"account": self.revenue, "credit": "33.334"},
            ],
            description="Rounding",
        )
        self.assertEqual(entry.total_debit, Decimal("33.33"))
        self.assertEqual(entry.total_credit, Decimal("33.33"))

    # =====================================================
    # REJECTED ENTRIES (ATOMICITY)
    # =====================================================

    def test_mixed_line_is_rejected(self):
        with self.assertRaises(MixedLineError) as ctx:
            post_entry(
                self.session,
                lines=[{"account": self.cash, "debit": 100, "credit": 50}],
                description="Mixed",
            )
        self.assertEqual(ctx.exception.line_number, 1)
        self.assertIn("line 1: cannot have both a debit and a credit", str(ctx.exception))
        self._assert_nothing_written()

    def test_unbalanced_entry_is_rejected(self):
        with self.assertRaises(UnbalancedEntryError) as ctx:
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 100, "credit": 0},
                    {"account": self.revenue, "debit": 0, "credit": 90},
                ],
                description="Unbalanced",
            )
        self.assertEqual(ctx.exception.total_debit, Decimal("100.00"))
        self.assertEqual(ctx.exception.total_credit, Decimal("90.00"))
        self._assert_nothing_written()

    def test_single_line_is_rejected(self):
        with self.assertRaises(InsufficientLinesError):
            post_entry(
                self.session,
                lines=[{"account": self.cash, "debit": 100, "credit": 0}],
                description="Single",
            )
        self._assert_nothing_written()

    def test_blank_row_does_not_count_toward_minimum(self):
        with self.assertRaises(InsufficientLinesError):
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 100},
                    {"account": None, "debit": 0, "credit": 0},
                ],
                description="One real line",
            )
        self._assert_nothing_written()

    def test_empty_line_with_account_is_rejected(self):
        with self.assertRaises(EmptyLineError) as ctx:
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 100},
                    {"account": self.revenue, "debit": 0, "credit": 0},
                    {"account": self.revenue, "credit": 100},
                ],
                description="Empty middle line",
            )
        self.assertEqual(ctx.exception.line_number, 2)
        self._assert_nothing_written()

    def test_entry_without_debits_is_rejected(self):
        with self.assertRaises(ZeroAmountError):
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "credit": 10},
                    {"account": self.revenue, "credit": 10},
                ],
                description="Nothing",
            )
        self._assert_nothing_written()

    def test_negative_amount_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": -5},
                    {"account": self.revenue, "credit": -5},
                ],
                description="Negative",
            )
        self.assertEqual(ctx.exception.line_number, 1)
        self._assert_nothing_written()

    def test_oversized_line_amount_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": "100000000000000.00"},
                    {"account": self.revenue, "credit": "100000000000000.00"},
                ],
                description="Too large",
            )
        self.assertEqual(ctx.exception.line_number, 1)
        self._assert_nothing_written()

    def test_total_beyond_column_size_is_rejected(self):
        top = "999999999999.99"
        with self.assertRaises(ValidationError) as ctx:
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": top},
                    {"account": self.cash, "debit": top},
                    {"account": self.revenue, "credit": top},
                    {"account": self.revenue, "credit": top},
                ],
                description="Sum too large",
            )
        self.assertIsNone(ctx.exception.line_number)
        self.assertIn("total exceeds", str(ctx.exception))
        self._assert_nothing_written()

    def test_largest_amount_is_accepted(self):
        entry = post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": "999999999999.99"},
                {"account": self.revenue, "credit": "999999999999.99"},
            ],
            description="Upper bound",
        )
        self.assertEqual(entry.total_debit, Decimal("999999999999.99"))

    def test_unknown_and_foreign_accounts_are_rejected(self):
        other, _, _, _ = make_company("Other SA", username="other")
        foreign = seed_chart(other)["571000"]

        with self.assertRaises(UnknownAccountError):
            post_entry(
                self.session,
                lines=[
                    {"account_id": 999999, "debit": 10},
                    {"account": self.revenue, "credit": 10},
                ],
                description="Unknown",
            )
        with self.assertRaises(UnknownAccountError) as ctx:
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 10},
                    {"account": foreign, "credit": 10},
                ],
                description="Foreign",
            )
        self.assertEqual(ctx.exception.line_number, 2)
        self.assertEqual(JournalEntry.objects.filter(company=self.company).count(), 0)

    def test_inactive_account_is_rejected(self):
        self.revenue.is_active = False
        self.revenue.save(update_fields=["is_active"])

        with self.assertRaises(InactiveAccountError):
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 10},
                    {"account": self.revenue, "credit": 10},
                ],
                description="Inactive",
            )
        self._assert_nothing_written()

    def test_blank_description_is_rejected(self):
        with self.assertRaises(ValidationError):
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 10},
                    {"account": self.revenue, "credit": 10},
                ],
                description="   ",
            )
        self._assert_nothing_written()

    def test_line_write_failure_rolls_back_header(self):
        with mock.patch(
            "accounting.services.journal_entry_service.JournalEntryLine.objects.bulk_create",
            side_effect=RuntimeError("disk full"),
        ):
            with self.assertRaises(RuntimeError):
                post_entry(
                    self.session,
                    lines=[
                        {"account": self.cash, "debit": 10},
                        {"account": self.revenue, "credit": 10},
                    ],
                    description="Crash between header and lines",
                )
        self._assert_nothing_written()

    # =====================================================
    # IDEMPOTENCY
    # =====================================================

    def test_same_key_same_payload_returns_existing_entry(self):
        lines = [
            {"account": self.cash, "debit": 25},
            {"account": self.revenue, "credit": 25},
        ]
        first = post_entry(self.session, lines=lines, description="Keyed", idempotency_key="K-1")
        again = post_entry(self.session, lines=lines, description="Keyed", idempotency_key="K-1")

        self.assertEqual(first.pk, again.pk)
        self.assertEqual(JournalEntry.objects.count(), 1)

    def test_same_key_different_payload_is_rejected(self):
        post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": 25},
                {"account": self.revenue, "credit": 25},
            ],
            description="Keyed",
            idempotency_key="K-1",
        )
        with self.assertRaises(IdempotencyError):
            post_entry(
                self.session,
                lines=[
                    {"account": self.cash, "debit": 30},
                    {"account": self.revenue, "credit": 30},
                ],
                description="Keyed",
                idempotency_key="K-1",
            )
        self.assertEqual(JournalEntry.objects.count(), 1)

    # =====================================================
    # NUMBERING FALLBACK
    # =====================================================

    def test_numbering_failure_falls_back_to_timestamp_number(self):
        with mock.patch(
            "accounting.services.journal_entry_service.next_entry_number",
            side_effect=EntryNumberingError("sequence table locked"),
        ):
            with self.assertLogs("accounting.services.journal_entry_service", level="WARNING"):
                with warnings.catch_warnings(record=True) as caught:
                    warnings.simplefilter("always")
                    entry = post_entry(
                        self.session,
                        lines=[
                            {"account": self.cash, "debit": 10},
                            {"account": self.revenue, "credit": 10},
                        ],
                        description="Fallback",
                    )

        self.assertTrue(entry.numbering_fallback)
        self.assertRegex(entry.entry_number, r"^ECR-\d{13,}$")
        self.assertTrue(any(issubclass(w.category, NumberingFallbackWarning) for w in caught))
        self.assertEqual(entry.lines.count(), 2)

    # =====================================================
    # IMMUTABILITY
    # =====================================================

    def test_manual_rows_must_be_objects(self):
        with self.assertRaises(ValidationError) as ctx:
            post_manual_entry(
                self.session,
                rows=[
                    {"account_id": self.cash.id, "debit": "10.00"},
                    "10.00",
                    {"account_id": self.revenue.id, "credit": "10.00"},
                ],
                description="Stray value",
            )
        self.assertEqual(ctx.exception.line_number, 2)

        with self.assertRaises(ValidationError):
            post_manual_entry(self.session, rows="not rows", description="Not a list")
        self._assert_nothing_written()

    def test_manual_rows_accept_amount_aliases(self):
        entry = post_manual_entry(
            self.session,
            rows=[
                {"account": self.cash.id, "debit_amount": "40.00"},
                {"account": "", "account_id": self.revenue.id, "credit_amount": "40.00"},
                {"account": "", "debit": "", "credit": ""},
            ],
            description="Form entry",
        )
        self.assertEqual(entry.total_credit, Decimal("40.00"))
        self.assertEqual(entry.lines.count(), 2)

    def test_posted_entries_and_lines_are_immutable(self):
        entry = post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": 10},
                {"account": self.revenue, "credit": 10},
            ],
            description="Immutable",
        )
        line = entry.lines.first()

        entry.description = "changed"
        with self.assertRaises(DjangoValidationError):
            entry.save()
        with self.assertRaises(DjangoValidationError):
            entry.delete()
        with self.assertRaises(DjangoValidationError):
            line.save()
        with self.assertRaises(DjangoValidationError):
            line.delete()

        self.assertEqual(JournalEntry.objects.get(pk=entry.pk).description, "Immutable")

    def test_account_protected_by_lines(self):
        post_entry(
            self.session,
            lines=[
                {"account": self.cash, "debit": 10},
                {"account": self.revenue, "credit": 10},
            ],
            description="Referenced",
        )
        self.assertTrue(Account.objects.get(pk=self.cash.pk).journal_lines.exists())
