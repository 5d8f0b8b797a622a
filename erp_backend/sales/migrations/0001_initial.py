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
            name="Sale",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("posting_status", models.CharField(choices=[("PENDING", "Pending"), ("POSTED", "Posted"), ("FAILED", "Failed"), ("SKIPPED", "Skipped (posting disabled)")], default="PENDING", max_length=10)),
                ("posting_error", models.TextField(blank=True, default="")),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("sale_number", models.CharField(help_text="System-generated sale number", max_length=40)),
                ("sale_date", models.DateField(default=django.utils.timezone.localdate)),
                ("customer_name", models.CharField(blank=True, default="", max_length=200)),
                ("status", models.CharField(choices=[("in_progress", "In progress"), ("delivered", "Delivered"), ("paid", "Paid"), ("cancelled", "Cancelled")], default="in_progress", max_length=20)),
                ("on_credit", models.BooleanField(default=False, help_text="Delivered before payment: revenue is booked against receivables")),
                ("total_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="sales", to="companies.company")),
                ("activity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="sales", to="companies.activity")),
                ("journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="sale", to="accounting.journalentry")),
                ("cogs_journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="sale_cogs", to="accounting.journalentry")),
                ("created_by", models.ForeignKey(blank=True, help_text="Staff member who recorded the sale", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="sales", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-sale_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["company", "sale_date"], name="idx_sale_company_date"),
                    models.Index(fields=["company", "status"], name="idx_sale_company_status"),
                    models.Index(fields=["company", "posting_status"], name="idx_sale_company_posting"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "sale_number"), name="uniq_sale_company_number"),
                ],
            },
        ),
        migrations.CreateModel(
            name="SaleItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=200)),
                ("product_code", models.CharField(blank=True, default="", max_length=50)),
                ("quantity", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("unit_cost", models.DecimalField(decimal_places=2, default=Decimal("0.00"), help_text="Purchase cost per unit at time of sale (snapshot).", max_digits=12)),
                ("total_price", models.DecimalField(decimal_places=2, editable=False, max_digits=14)),
                ("sale", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="sales.sale")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
