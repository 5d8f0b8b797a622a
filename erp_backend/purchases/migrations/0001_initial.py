from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("companies", "0001_initial"),
        ("accounting", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Purchase",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("posting_status", models.CharField(choices=[("PENDING", "Pending"), ("POSTED", "Posted"), ("FAILED", "Failed"), ("SKIPPED", "Skipped (posting disabled)")], default="PENDING", max_length=10)),
                ("posting_error", models.TextField(blank=True, default="")),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("purchase_number", models.CharField(max_length=40)),
                ("purchase_date", models.DateField(default=django.utils.timezone.localdate)),
                ("supplier_name", models.CharField(blank=True, default="", max_length=200)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("received", "Received"), ("paid", "Paid"), ("cancelled", "Cancelled")], default="pending", max_length=20)),
                ("on_credit", models.BooleanField(default=False, help_text="Received before payment: the credit side goes to payables")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="purchases", to="companies.company")),
                ("activity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="purchases", to="companies.activity")),
                ("journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="purchase", to="accounting.journalentry")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="purchases_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-purchase_date", "-created_at"],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "purchase_number"), name="uniq_purchase_company_number"),
                    models.CheckConstraint(condition=models.Q(("total_amount__gte", Decimal("0.00"))), name="chk_purchase_total_nonnegative"),
                ],
                "indexes": [
                    models.Index(fields=["company", "purchase_date"], name="idx_purchase_company_date"),
                    models.Index(fields=["company", "status"], name="idx_purchase_company_status"),
                    models.Index(fields=["company", "posting_status"], name="idx_purchase_company_posting"),
                ],
            },
        ),
        migrations.CreateModel(
            name="PurchaseItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=200)),
                ("product_code", models.CharField(blank=True, default="", max_length=50)),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("received_quantity", models.PositiveIntegerField(default=0)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, editable=False, max_digits=14)),
                ("purchase", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="purchases.purchase")),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(("unit_price__gte", Decimal("0.00"))), name="chk_purchase_item_price_nonnegative"),
                ],
            },
        ),
    ]
