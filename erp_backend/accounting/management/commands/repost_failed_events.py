# accounting/management/commands/repost_failed_events.py

from __future__ import annotations

from django.core.management.base import BaseCommand

from accounting.models.business_event import PostingStatus
from accounting.models.expense import Expense
from accounting.services.expense_service import post_expense
from companies.session import TenantSession
from purchases.models import Purchase
from purchases.services.purchase_service import post_purchase
from sales.models import Sale
from sales.services.sale_service import post_sale


def _session_for(record) -> TenantSession:
    return TenantSession(
        company=record.company,
        user=record.created_by,
        activity=record.activity,
    )


class Command(BaseCommand):
    help = (
        "Retry ledger postings for sales, purchases and expenses whose posting failed "
        "(or was skipped, with --include-skipped). "
        "Postings are keyed, so a retry never double-posts."
    )

    def add_arguments(self, parser):
        parser.add_argument("--company", type=int, help="Only retry records of this company id")
        parser.add_argument("--dry-run", action="store_true", help="List the records without posting")
        parser.add_argument(
            "--include-skipped",
            action="store_true",
            help="Also post records skipped while ACCOUNTING_POSTING_ENABLED was off",
        )

    def handle(self, *args, **options):
        company_id = options.get("company")
        dry_run = bool(options.get("dry_run"))
        statuses = [PostingStatus.FAILED]
        if options.get("include_skipped"):
            statuses.append(PostingStatus.SKIPPED)

        targets = [
            ("sale", Sale, "sale_number", post_sale),
            ("purchase", Purchase, "purchase_number", post_purchase),
            ("expense", Expense, "title", post_expense),
        ]

        ok = 0
        failed = 0
        for kind, model, label_field, post in targets:
            qs = model.objects.filter(posting_status__in=statuses).select_related(
                "company", "activity", "created_by"
            )
            if company_id:
                qs = qs.filter(company_id=company_id)

            for record in qs.order_by("id"):
                label = getattr(record, label_field)
                if dry_run:
                    self.stdout.write(f"[dry-run] {kind} #{record.pk} {label}: {record.posting_error}")
                    continue

                if post(_session_for(record), **{kind: record}):
                    ok += 1
                    self.stdout.write(self.style.SUCCESS(f"{kind} #{record.pk} {label}: posted"))
                else:
                    failed += 1
                    record.refresh_from_db(fields=["posting_error"])
                    self.stdout.write(
                        self.style.ERROR(f"{kind} #{record.pk} {label}: {record.posting_error}")
                    )

        if not dry_run:
            self.stdout.write(f"Done. posted={ok} still_failed={failed}")
