# accounting/models/journal_line.py

"""
======================================================
PATH: accounting/models/journal_line.py
======================================================
JOURNAL ENTRY LINE MODEL

One debit or one credit against a single account.

Guarantees:
- Immutable once created (no updates, no deletes)
- Exactly one side is strictly positive, the other is exactly zero
  (model clean + DB check constraint)
- Lines cannot outlive their entry (entries themselves are never deleted)
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalEntryLine(models.Model):
    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )

    line_number = models.PositiveIntegerField(default=1)

    description = models.CharField(max_length=255, blank=True, default="")

    debit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    credit_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    class Meta:
        verbose_name = "Journal Entry Line"
        verbose_name_plural = "Journal Entry Lines"
        ordering = ["journal_entry", "line_number"]
        indexes = [
            models.Index(fields=["account"], name="idx_line_account"),
            models.Index(fields=["journal_entry", "line_number"], name="idx_line_entry_number"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    Q(debit_amount__gt=0, credit_amount=0)
                    | Q(debit_amount=0, credit_amount__gt=0)
                ),
                name="chk_line_one_side_positive",
            ),
        ]

    def __str__(self):
        if self.debit_amount > 0:
            return f"DEBIT {self.debit_amount} → {self.account}"
        return f"CREDIT {self.credit_amount} → {self.account}"

    @property
    def is_debit(self) -> bool:
        return self.debit_amount > 0

    def clean(self):
        debit = self.debit_amount or Decimal("0.00")
        credit = self.credit_amount or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Line amounts cannot be negative")
        if debit > 0 and credit > 0:
            raise ValidationError("A line cannot have both a debit and a credit")
        if debit == 0 and credit == 0:
            raise ValidationError("A line must have either a debit or a credit")

        if self.account_id and self.journal_entry_id:
            if self.account.company_id != self.journal_entry.company_id:
                raise ValidationError("Line account must belong to the entry company")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalEntryLine records are immutable and cannot be modified")

        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalEntryLine records are immutable and cannot be deleted")
