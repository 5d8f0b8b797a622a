# sales/models/sale.py

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone

from accounting.models.business_event import PostedBusinessEvent
from accounting.models.journal import JournalEntry
from companies.models import Activity, Company

User = settings.AUTH_USER_MODEL


class Sale(PostedBusinessEvent):
    """
    A customer sale (business event).

    GUARANTEES:
    - sale_number unique per company
    - total_amount is the sum of item totals (set by sale_service)
    - Revenue (and COGS) entries are posted on the first transition into
      delivered or paid; the sale survives a posting failure

    STATUS:
    - in_progress -> delivered | paid | cancelled
    - delivered   -> paid
    - paid, cancelled are terminal
    """

    STATUS_IN_PROGRESS = "in_progress"
    STATUS_DELIVERED = "delivered"
    STATUS_PAID = "paid"
    STATUS_CANCELLED = "cancelled"

    STATUS_CHOICES = [
        (STATUS_IN_PROGRESS, "In progress"),
        (STATUS_DELIVERED, "Delivered"),
        (STATUS_PAID, "Paid"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    POSTABLE_STATUSES = (STATUS_DELIVERED, STATUS_PAID)

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="sales",
    )
    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sales",
    )

    sale_number = models.CharField(
        max_length=40,
        help_text="System-generated sale number",
    )
    sale_date = models.DateField(default=timezone.localdate)

    customer_name = models.CharField(max_length=200, blank=True, default="")

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_IN_PROGRESS,
    )
    on_credit = models.BooleanField(
        default=False,
        help_text="Delivered before payment: revenue is booked against receivables",
    )

    total_amount = models.DecimalField(
        max_digits=14, decimal_places=2, default=Decimal("0.00")
    )

    notes = models.TextField(blank=True, default="")

    journal_entry = models.OneToOneField(
        JournalEntry,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sale",
    )
    cogs_journal_entry = models.OneToOneField(
        JournalEntry,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="sale_cogs",
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="sales",
        help_text="Staff member who recorded the sale",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-sale_date", "-created_at"]
        indexes = [
            models.Index(fields=["company", "sale_date"], name="idx_sale_company_date"),
            models.Index(fields=["company", "status"], name="idx_sale_company_status"),
            models.Index(fields=["company", "posting_status"], name="idx_sale_company_posting"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "sale_number"],
                name="uniq_sale_company_number",
            ),
        ]

    @property
    def is_postable(self) -> bool:
        return self.status in self.POSTABLE_STATUSES

    def clean(self):
        self.sale_number = (self.sale_number or "").strip()
        if not self.sale_number:
            raise ValidationError("Sale number is required")

        if self.activity_id and self.company_id and self.activity.company_id != self.company_id:
            raise ValidationError("Sale activity must belong to the sale company")

        if self.total_amount is not None and self.total_amount < 0:
            raise ValidationError("Sale total cannot be negative")

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False, validate_constraints=False)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.sale_number} | {self.total_amount}"
