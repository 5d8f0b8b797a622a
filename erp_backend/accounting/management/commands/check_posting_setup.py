# accounting/management/commands/check_posting_setup.py

from django.core.management.base import BaseCommand, CommandError

from accounting.services.account_resolver import check_posting_setup
from companies.models import Company


class Command(BaseCommand):
    help = "Report missing semantic accounts and expense category mappings per company."

    def add_arguments(self, parser):
        parser.add_argument("--company", type=int, help="Only check this company id")
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any problem is found.",
        )

    def handle(self, *args, **options):
        companies = Company.objects.filter(is_active=True).order_by("id")
        if options.get("company"):
            companies = companies.filter(pk=options["company"])
            if not companies.exists():
                raise CommandError(f"Company {options['company']} not found or inactive")

        total_problems = 0
        for company in companies:
            problems = check_posting_setup(company)
            if not problems:
                self.stdout.write(self.style.SUCCESS(f"[{company.pk}] {company}: ready"))
                continue

            total_problems += len(problems)
            self.stdout.write(self.style.WARNING(f"[{company.pk}] {company}: {len(problems)} problem(s)"))
            for problem in problems:
                self.stdout.write(f"  - {problem}")

        if total_problems and options.get("strict"):
            raise CommandError(f"{total_problems} posting setup problem(s) found")
