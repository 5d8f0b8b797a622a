# accounting/models/expense.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from accounting.expense_categories import CATEGORY_CHOICES
from accounting.models.account import Account
from accounting.models.business_event import PostedBusinessEvent
from accounting.models.journal import JournalEntry
from companies.models import Activity, Company


class ExpenseCategoryAccount(models.Model):
    """
    Explicit category -> expense account map, one row per (company, category).

    Validated when configured (same company, active, EXPENSE type) so that a
    bad mapping fails at setup time, not when an expense is posted.
    """

    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="expense_category_accounts",
    )
    category = models.CharField(max_length=40, choices=CATEGORY_CHOICES)
    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="expense_categories",
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["category"]
        verbose_name = "Expense Category Account"
        verbose_name_plural = "Expense Category Accounts"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "category"],
                name="uniq_expense_category_company",
            ),
        ]

    def __str__(self):
        return f"{self.category} → {self.account}"

    def clean(self):
        if self.account_id and self.company_id:
            if self.account.company_id != self.company_id:
                raise ValidationError("Mapped account must belong to the same company")
            if self.account.account_type != Account.EXPENSE:
                raise ValidationError("Expense categories must map to an EXPENSE account")
            if not self.account.is_active:
                raise ValidationError("Expense categories cannot map to an inactive account")

    def save(self, *args, **kwargs):
        self.full_clean(validate_unique=False, validate_constraints=False)
        return super().save(*args, **kwargs)


class Expense(PostedBusinessEvent):
    """
    Expense (business event). Posted to the ledger after it is saved:
    Dr <category account> / Cr Cash or Bank.
    """

    PAYMENT_CASH = "cash"
    PAYMENT_BANK = "bank"

    PAYMENT_SOURCES = [
        (PAYMENT_CASH, "Cash"),
        (PAYMENT_BANK, "Bank"),
    ]

    company = models.ForeignKey(
        Company,
        on_delete=models.PROTECT,
        related_name="expenses",
    )
    activity = models.ForeignKey(
        Activity,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expenses",
    )

    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, default="")
    category = models.CharField(max_length=40, choices=CATEGORY_CHOICES)

    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    expense_date = models.DateField(default=timezone.localdate)

    payment_source = models.CharField(
        max_length=10,
        choices=PAYMENT_SOURCES,
        default=PAYMENT_CASH,
    )

    journal_entry = models.OneToOneField(
        JournalEntry,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="expense",
    )

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="expenses_created",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-expense_date", "-created_at"]
        verbose_name = "Expense"
        verbose_name_plural = "Expenses"
        indexes = [
            models.Index(fields=["company", "expense_date"], name="idx_expense_company_date"),
            models.Index(fields=["company", "posting_status"], name="idx_expense_company_posting"),
        ]

    def __str__(self):
        return f"Expense #{self.id} - {self.title} {self.amount} ({self.expense_date})"

    def clean(self):
        self.title = (self.title or "").strip()
        if not self.title:
            raise ValidationError("Expense title is required")

        if self.activity_id and self.company_id and self.activity.company_id != self.company_id:
            raise ValidationError("Expense activity must belong to the expense company")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
