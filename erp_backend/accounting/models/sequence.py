# accounting/models/sequence.py

"""
ENTRY NUMBER SEQUENCE

One counter row per (company, key). The row is locked with
select_for_update while it is incremented, so concurrent postings for the
same company serialize on it and never receive the same number.
"""

from __future__ import annotations

from django.db import models

from companies.models import Company


class EntryNumberSequence(models.Model):
    KEY_JOURNAL = "JOURNAL"

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="entry_sequences",
    )
    key = models.CharField(max_length=30, default=KEY_JOURNAL)
    prefix = models.CharField(max_length=20)
    padding_digits = models.PositiveSmallIntegerField(default=6)
    last_number = models.PositiveBigIntegerField(default=0)

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Entry Number Sequence"
        verbose_name_plural = "Entry Number Sequences"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "key"],
                name="uniq_sequence_company_key",
            ),
        ]

    def __str__(self):
        return f"{self.company_id}:{self.key} @ {self.last_number}"

    def format_number(self, value: int) -> str:
        return f"{self.prefix}-{str(value).zfill(self.padding_digits)}"
