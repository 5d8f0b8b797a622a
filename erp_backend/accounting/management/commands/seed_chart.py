# accounting/management/commands/seed_chart.py

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounting.expense_categories import DEFAULT_CATEGORY_ACCOUNT_CODES, DEFAULT_EXPENSE_ACCOUNTS
from accounting.models.account import Account
from accounting.models.expense import ExpenseCategoryAccount
from companies.models import Company

BASE_ACCOUNTS = [
    ("101000", "Share capital", Account.EQUITY),
    ("371000", "Merchandise inventory", Account.ASSET),
    ("401000", "Suppliers (payables)", Account.LIABILITY),
    ("411000", "Customers (receivables)", Account.ASSET),
    ("521000", "Bank", Account.ASSET),
    ("571000", "Cash", Account.ASSET),
    ("603000", "Cost of goods sold", Account.EXPENSE),
    ("700000", "Sales of goods", Account.REVENUE),
]


class Command(BaseCommand):
    help = "Seed the standard chart of accounts and expense category map for a company (idempotent)"

    def add_arguments(self, parser):
        parser.add_argument("--company", type=int, required=True, help="Company id")

    @transaction.atomic
    def handle(self, *args, **options):
        try:
            company = Company.objects.get(pk=options["company"])
        except Company.DoesNotExist as exc:
            raise CommandError(f"Company {options['company']} not found") from exc

        self.stdout.write(f"Seeding chart of accounts for {company}...")

        accounts = list(BASE_ACCOUNTS)
        accounts += [(code, name, Account.EXPENSE) for code, name in DEFAULT_EXPENSE_ACCOUNTS]

        created_count = 0
        updated_count = 0
        by_code = {}

        for code, name, account_type in accounts:
            acc, acc_created = Account.objects.get_or_create(
                company=company,
                code=code,
                defaults={
                    "name": name,
                    "account_type": account_type,
                    "is_active": True,
                },
            )
            by_code[code] = acc

            if acc_created:
                created_count += 1
                continue

            # Names are left alone: companies rename seeded accounts.
            needs_update = False
            if acc.account_type != account_type:
                acc.account_type = account_type
                needs_update = True
            if not acc.is_active:
                acc.is_active = True
                needs_update = True

            if needs_update:
                acc.save(update_fields=["account_type", "is_active", "updated_at"])
                updated_count += 1

        mapped_count = 0
        for category, code in DEFAULT_CATEGORY_ACCOUNT_CODES.items():
            _mapping, mapping_created = ExpenseCategoryAccount.objects.get_or_create(
                company=company,
                category=category,
                defaults={"account": by_code[code]},
            )
            if mapping_created:
                mapped_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Chart seeded ({created_count} new accounts, {updated_count} updated, "
                f"{mapped_count} expense categories mapped)."
            )
        )
