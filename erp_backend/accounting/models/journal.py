# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL

Represents a single accounting transaction (journal header).

Guarantees:
- Immutable once created (no updates, no deletes)
- entry_number unique per company
- idempotency_key unique per company (when provided)
- total_debit == total_credit (DB check constraint)
- entry_date is the accounting effective date (used for balances and reports)
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from companies.models import Activity, Company


class JournalEntry(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="journal_entries",
    )

    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="journal_entries",
    )

    entry_number = models.CharField(max_length=40)
    numbering_fallback = models.BooleanField(
        default=False,
        help_text="True when the sequence was unavailable and a timestamp number was used",
    )

    entry_date = models.DateField(help_text="Accounting effective date")

    description = models.TextField(help_text="Narrative description of the journal entry")

    reference = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Free-text reference (sale number, invoice, receipt...)",
    )

    idempotency_key = models.CharField(
        max_length=120,
        null=True,
        blank=True,
        help_text="Caller-supplied key; retries with the same key return the same entry",
    )
    payload_fingerprint = models.CharField(max_length=64, blank=True, default="")

    total_debit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"))

    reverses = models.OneToOneField(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="reversed_by",
        help_text="The entry this one offsets",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="journal_entries_created",
    )

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when the journal entry was created",
    )

    class Meta:
        ordering = ["-entry_date", "-created_at"]
        indexes = [
            models.Index(fields=["company", "entry_date"], name="idx_journal_company_date"),
            models.Index(fields=["company", "reference"], name="idx_journal_company_ref"),
            models.Index(fields=["created_at"], name="idx_journal_created_at"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "entry_number"],
                name="uniq_journal_company_number",
            ),
            models.UniqueConstraint(
                fields=["company", "idempotency_key"],
                condition=Q(idempotency_key__isnull=False),
                name="uniq_journal_company_idem_key",
            ),
            models.CheckConstraint(
                condition=Q(total_debit=F("total_credit")),
                name="chk_journal_totals_balanced",
            ),
            models.CheckConstraint(
                condition=Q(total_debit__gt=0),
                name="chk_journal_totals_positive",
            ),
        ]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"

    def __str__(self):
        return f"{self.entry_number} – {self.entry_date}"

    @property
    def is_reversal(self) -> bool:
        return self.reverses_id is not None

    def clean(self):
        self.reference = (self.reference or "").strip()
        if self.idempotency_key is not None:
            self.idempotency_key = str(self.idempotency_key).strip() or None

        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Journal entry description is required")

        if self.activity_id and self.company_id and self.activity.company_id != self.company_id:
            raise ValidationError("Journal entry activity must belong to the entry company")

        if self.total_debit != self.total_credit:
            raise ValidationError("Journal entry totals must balance")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalEntry records are immutable once created")

        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalEntry records are immutable and cannot be deleted")
