# sales/models/sale_item.py

"""
SALE ITEM (SNAPSHOT)

Represents a snapshot of a sold line item.

Notes:
- unit_price and unit_cost are captured when the sale is recorded;
  unit_cost feeds the COGS entry (Dr COGS / Cr Inventory)
- total_price is derived (quantity x unit_price), never user-supplied
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from .sale import Sale

TWOPLACES = Decimal("0.01")


class SaleItem(models.Model):
    sale = models.ForeignKey(
        Sale,
        on_delete=models.CASCADE,
        related_name="items",
    )

    product_name = models.CharField(max_length=200)
    product_code = models.CharField(max_length=50, blank=True, default="")

    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])

    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
    )

    unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Purchase cost per unit at time of sale (snapshot).",
    )

    total_price = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        editable=False,
    )

    class Meta:
        ordering = ["id"]

    @property
    def cost_amount(self) -> Decimal:
        return (Decimal(self.unit_cost or 0) * self.quantity).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )

    def clean(self):
        self.product_name = (self.product_name or "").strip()
        if not self.product_name:
            raise ValidationError("Product name is required")
        if self.unit_price is not None and self.unit_price < 0:
            raise ValidationError("Unit price cannot be negative")
        if self.unit_cost is not None and self.unit_cost < 0:
            raise ValidationError("Unit cost cannot be negative")

    def save(self, *args, **kwargs):
        self.total_price = (Decimal(self.unit_price or 0) * (self.quantity or 0)).quantize(
            TWOPLACES, rounding=ROUND_HALF_UP
        )
        self.full_clean()
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"
