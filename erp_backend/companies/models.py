# companies/models.py

"""
TENANCY MODELS

A Company is the tenant boundary: accounts, journal entries, sales,
purchases and expenses all carry a company FK and every service query
filters on it.

An Activity is an operating sub-unit of a company (a shop, a depot).
Journal entries and business records may be attributed to one.

A Membership grants a user access to one company, with a role and an
optional default activity.
"""

from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Company(models.Model):
    name = models.CharField(max_length=200)
    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    tax_number = models.CharField(max_length=64, blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]
        verbose_name = "Company"
        verbose_name_plural = "Companies"
        constraints = [
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_company_name_not_blank",
            ),
        ]

    def __str__(self):
        return self.name

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Company name is required")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class Activity(models.Model):
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="activities",
    )
    name = models.CharField(max_length=200)
    address = models.TextField(blank=True, default="")
    manager_name = models.CharField(max_length=150, blank=True, default="")

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["company", "name"]
        verbose_name = "Activity"
        verbose_name_plural = "Activities"
        constraints = [
            models.UniqueConstraint(
                fields=["company", "name"],
                name="uniq_activity_company_name",
            ),
        ]

    def __str__(self):
        return f"{self.company} / {self.name}"

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError("Activity name is required")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)


class Membership(models.Model):
    ROLE_OWNER = "owner"
    ROLE_ADMIN = "admin"
    ROLE_SELLER = "seller"
    ROLE_ACCOUNTANT = "accountant"
    ROLE_STOCK_MANAGER = "stock_manager"

    ROLES = [
        (ROLE_OWNER, "Owner"),
        (ROLE_ADMIN, "Administrator"),
        (ROLE_SELLER, "Seller"),
        (ROLE_ACCOUNTANT, "Accountant"),
        (ROLE_STOCK_MANAGER, "Stock manager"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="company_memberships",
    )
    company = models.ForeignKey(
        Company,
        on_delete=models.CASCADE,
        related_name="memberships",
    )
    activity = models.ForeignKey(
        Activity,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="memberships",
        help_text="Default activity for entries recorded by this member",
    )
    role = models.CharField(max_length=20, choices=ROLES, default=ROLE_SELLER)

    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["company", "user"]
        verbose_name = "Membership"
        verbose_name_plural = "Memberships"
        constraints = [
            models.UniqueConstraint(
                fields=["user", "company"],
                name="uniq_membership_user_company",
            ),
        ]
        indexes = [
            models.Index(fields=["user", "is_active"], name="idx_membership_user_active"),
        ]

    def __str__(self):
        return f"{self.user} @ {self.company} ({self.role})"

    def clean(self):
        if self.activity_id and self.company_id:
            if self.activity.company_id != self.company_id:
                raise ValidationError("Membership activity must belong to the same company")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
