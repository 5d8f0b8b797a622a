# accounting/models/business_event.py

"""
BUSINESS EVENT POSTING STATE

Abstract base for records (sales, purchases, expenses) whose accounting
entry is posted after the record itself is committed.

The record always survives a posting failure; the failure is kept on the
row (posting_status=FAILED + posting_error) so an operator can see it and
`repost_failed_events` can retry it.
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class PostingStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    POSTED = "POSTED", "Posted"
    FAILED = "FAILED", "Failed"
    SKIPPED = "SKIPPED", "Skipped (posting disabled)"


class PostedBusinessEvent(models.Model):
    posting_status = models.CharField(
        max_length=10,
        choices=PostingStatus.choices,
        default=PostingStatus.PENDING,
    )
    posting_error = models.TextField(blank=True, default="")
    posted_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def posting_failed(self) -> bool:
        return self.posting_status == PostingStatus.FAILED

    def _set_posting_state(self, status: str, error: str = "") -> None:
        self.posting_status = status
        self.posting_error = error
        self.posted_at = timezone.now() if status == PostingStatus.POSTED else None
        type(self).objects.filter(pk=self.pk).update(
            posting_status=self.posting_status,
            posting_error=self.posting_error,
            posted_at=self.posted_at,
        )

    def mark_posted(self) -> None:
        self._set_posting_state(PostingStatus.POSTED)

    def mark_posting_failed(self, error: str) -> None:
        self._set_posting_state(PostingStatus.FAILED, str(error)[:2000])

    def mark_posting_skipped(self) -> None:
        self._set_posting_state(PostingStatus.SKIPPED)
