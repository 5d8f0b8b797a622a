from decimal import Decimal

from django.conf import settings
from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone


EXPENSE_CATEGORY_CHOICES = [
    ("impot", "Income tax"),
    ("taxe", "Taxes"),
    ("cnss", "Social security (CNSS)"),
    ("dgi", "Tax office (DGI)"),
    ("patente", "Business licence"),
    ("electricite", "Electricity"),
    ("eau", "Water"),
    ("internet", "Internet"),
    ("telephone", "Telephone"),
    ("transport", "Transport"),
    ("carburant", "Fuel"),
    ("manutention", "Handling"),
    ("location_vehicule", "Vehicle rental"),
    ("fournitures_bureau", "Office supplies"),
    ("nettoyage", "Cleaning"),
    ("reparation_materiel", "Equipment repair"),
    ("formation_personnel", "Staff training"),
    ("recrutement", "Recruitment"),
    ("uniforme", "Uniforms"),
    ("primes", "Bonuses"),
    ("salaires", "Salaries"),
    ("divers", "Miscellaneous"),
    ("hospitalite", "Hospitality"),
    ("deplacements", "Travel"),
    ("repas", "Meals"),
    ("imprevus", "Contingencies"),
]

POSTING_STATUS_CHOICES = [
    ("PENDING", "Pending"),
    ("POSTED", "Posted"),
    ("FAILED", "Failed"),
    ("SKIPPED", "Skipped (posting disabled)"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("companies", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=150)),
                ("account_type", models.CharField(choices=[("ASSET", "Asset"), ("LIABILITY", "Liability"), ("EQUITY", "Equity"), ("REVENUE", "Revenue"), ("EXPENSE", "Expense")], max_length=20)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="accounts", to="companies.company")),
                ("parent", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="children", to="accounting.account")),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["company", "code"], name="idx_account_company_code"),
                    models.Index(fields=["company", "account_type"], name="idx_account_company_type"),
                    models.Index(fields=["company", "is_active"], name="idx_account_company_active"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "code"), name="uniq_account_company_code"),
                    models.CheckConstraint(condition=models.Q(("code", ""), _negated=True), name="chk_account_code_not_blank"),
                    models.CheckConstraint(condition=models.Q(("name", ""), _negated=True), name="chk_account_name_not_blank"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_number", models.CharField(max_length=40)),
                ("numbering_fallback", models.BooleanField(default=False, help_text="True when the sequence was unavailable and a timestamp number was used")),
                ("entry_date", models.DateField(help_text="Accounting effective date")),
                ("description", models.TextField(help_text="Narrative description of the journal entry")),
                ("reference", models.CharField(blank=True, default="", help_text="Free-text reference (sale number, invoice, receipt...)", max_length=100)),
                ("idempotency_key", models.CharField(blank=True, help_text="Caller-supplied key; retries with the same key return the same entry", max_length=120, null=True)),
                ("payload_fingerprint", models.CharField(blank=True, default="", max_length=64)),
                ("total_debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("total_credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("created_at", models.DateTimeField(auto_now_add=True, help_text="Timestamp when the journal entry was created")),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="journal_entries", to="companies.company")),
                ("activity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="journal_entries", to="companies.activity")),
                ("reverses", models.OneToOneField(blank=True, help_text="The entry this one offsets", null=True, on_delete=django.db.models.deletion.PROTECT, related_name="reversed_by", to="accounting.journalentry")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="journal_entries_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Journal Entry",
                "verbose_name_plural": "Journal Entries",
                "ordering": ["-entry_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["company", "entry_date"], name="idx_journal_company_date"),
                    models.Index(fields=["company", "reference"], name="idx_journal_company_ref"),
                    models.Index(fields=["created_at"], name="idx_journal_created_at"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "entry_number"), name="uniq_journal_company_number"),
                    models.UniqueConstraint(condition=models.Q(("idempotency_key__isnull", False)), fields=("company", "idempotency_key"), name="uniq_journal_company_idem_key"),
                    models.CheckConstraint(condition=models.Q(("total_debit", models.F("total_credit"))), name="chk_journal_totals_balanced"),
                    models.CheckConstraint(condition=models.Q(("total_debit__gt", 0)), name="chk_journal_totals_positive"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalEntryLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("line_number", models.PositiveIntegerField(default=1)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("debit_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("credit_amount", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14)),
                ("journal_entry", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="lines", to="accounting.journalentry")),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="journal_lines", to="accounting.account")),
            ],
            options={
                "verbose_name": "Journal Entry Line",
                "verbose_name_plural": "Journal Entry Lines",
                "ordering": ["journal_entry", "line_number"],
                "indexes": [
                    models.Index(fields=["account"], name="idx_line_account"),
                    models.Index(fields=["journal_entry", "line_number"], name="idx_line_entry_number"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(("credit_amount", 0), ("debit_amount__gt", 0)),
                            models.Q(("credit_amount__gt", 0), ("debit_amount", 0)),
                            _connector="OR",
                        ),
                        name="chk_line_one_side_positive",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="EntryNumberSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("key", models.CharField(default="JOURNAL", max_length=30)),
                ("prefix", models.CharField(max_length=20)),
                ("padding_digits", models.PositiveSmallIntegerField(default=6)),
                ("last_number", models.PositiveBigIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="entry_sequences", to="companies.company")),
            ],
            options={
                "verbose_name": "Entry Number Sequence",
                "verbose_name_plural": "Entry Number Sequences",
                "constraints": [
                    models.UniqueConstraint(fields=("company", "key"), name="uniq_sequence_company_key"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ExpenseCategoryAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("category", models.CharField(choices=EXPENSE_CATEGORY_CHOICES, max_length=40)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="expense_category_accounts", to="companies.company")),
                ("account", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="expense_categories", to="accounting.account")),
            ],
            options={
                "verbose_name": "Expense Category Account",
                "verbose_name_plural": "Expense Category Accounts",
                "ordering": ["category"],
                "constraints": [
                    models.UniqueConstraint(fields=("company", "category"), name="uniq_expense_category_company"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("posting_status", models.CharField(choices=POSTING_STATUS_CHOICES, default="PENDING", max_length=10)),
                ("posting_error", models.TextField(blank=True, default="")),
                ("posted_at", models.DateTimeField(blank=True, null=True)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="")),
                ("category", models.CharField(choices=EXPENSE_CATEGORY_CHOICES, max_length=40)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=14, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("expense_date", models.DateField(default=django.utils.timezone.localdate)),
                ("payment_source", models.CharField(choices=[("cash", "Cash"), ("bank", "Bank")], default="cash", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("company", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="expenses", to="companies.company")),
                ("activity", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="expenses", to="companies.activity")),
                ("journal_entry", models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="expense", to="accounting.journalentry")),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="expenses_created", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Expense",
                "verbose_name_plural": "Expenses",
                "ordering": ["-expense_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["company", "expense_date"], name="idx_expense_company_date"),
                    models.Index(fields=["company", "posting_status"], name="idx_expense_company_posting"),
                ],
            },
        ),
    ]
