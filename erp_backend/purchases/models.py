# purchases/models.py

from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from accounting.models.business_event import PostedBusinessEvent
from accounting.models.journal import JournalEntry
from companies.models import Activity, Company

TWOPLACES = Decimal("0.01")


def _money(v) -> Decimal:
    return Decimal(str(v or "0.00")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


User = settings.AUTH_USER_MODEL


class Purchase(PostedBusinessEvent):
    """
    Supplier purchase header (business event).

    Posting is performed by services, after the purchase is saved:
    - reaching received or paid posts Dr Inventory / Cr Cash (or Payable
      when on_credit), once
    - a posting failure is kept on the row; the purchase stands
    """

    STATUS_PENDING = "pending"
    STATUS_RECEIVED = "received"
    STATUS_PAID = "paid"
    STATUS_CANCELLED = "cancelled"

    STATUSES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_RECEIVED, "Received"),
        (STATUS_PAID, "Paid"),
        (STATUS_CANCELLED, "Cancelled"),
    ]

    POSTABLE_STATUSES = (STATUS_RECEIVED, STATUS_PAID)

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="purchases",
    )
    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="purchases",
    )

    purchase_number = models.CharField(max_length=40)
    purchase_date = models.DateField(default=timezone.localdate)

    supplier_name = models.CharField(max_length=200, blank=True, default="")

    status = models.CharField(max_length=20, choices=STATUSES, default=STATUS_PENDING)
    on_credit = models.BooleanField(
        default=False,
        help_text="Received before payment: the credit side goes to payables",
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
        related_name="purchase",
    )

    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchases_created",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-purchase_date", "-created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["company", "purchase_number"],
                name="uniq_purchase_company_number",
            ),
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=Decimal("0.00")),
                name="chk_purchase_total_nonnegative",
            ),
        ]
        indexes = [
            models.Index(fields=["company", "purchase_date"], name="idx_purchase_company_date"),
            models.Index(fields=["company", "status"], name="idx_purchase_company_status"),
            models.Index(fields=["company", "posting_status"], name="idx_purchase_company_posting"),
        ]

    @property
    def is_postable(self) -> bool:
        return self.status in self.POSTABLE_STATUSES

    def clean(self):
        self.purchase_number = (self.purchase_number or "").strip()
        if not self.purchase_number:
            raise ValidationError("Purchase number is required")

        if self.activity_id and self.company_id and self.activity.company_id != self.company_id:
            raise ValidationError("Purchase activity must belong to the purchase company")

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False, validate_constraints=False)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.purchase_number} | {self.total_amount}"


class PurchaseItem(models.Model):
    purchase = models.ForeignKey(
        Purchase,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product_name = models.CharField(max_length=200)
    product_code = models.CharField(max_length=50, blank=True, default="")

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    received_quantity = models.PositiveIntegerField(default=0)

    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    total_price = models.DecimalField(max_digits=14, decimal_places=2, editable=False)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(unit_price__gte=Decimal("0.00")),
                name="chk_purchase_item_price_nonnegative",
            ),
        ]

    def clean(self):
        self.product_name = (self.product_name or "").strip()
        if not self.product_name:
            raise ValidationError("Product name is required")
        if self.received_quantity and self.quantity and self.received_quantity > self.quantity:
            raise ValidationError("Received quantity cannot exceed ordered quantity")

    def save(self, *args, **kwargs):
        self.total_price = _money(Decimal(self.unit_price or 0) * (self.quantity or 0))
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
