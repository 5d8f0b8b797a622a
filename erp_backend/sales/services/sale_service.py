# sales/services/sale_service.py

"""
CORE SALES DOMAIN SERVICE

SINGLE SOURCE OF TRUTH for:
- Sale + SaleItem creation and totals
- Status transitions (sale_lifecycle)
- Handing postable sales to accounting (best-effort)

GUARANTEES:
- The sale row is written in its own transaction, before any posting
- A posting failure is stored on the sale (posting_status=FAILED); the
  sale is never rolled back because accounting failed
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.business_event import PostingStatus
from accounting.services.exceptions import ValidationError
from accounting.services.posting import (
    post_business_event,
    post_sale_cogs_to_ledger,
    post_sale_to_ledger,
)
from accounting.services.sequence_service import next_number
from sales.models import Sale, SaleItem
from sales.services.sale_lifecycle import validate_initial_status, validate_transition

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
SALE_SEQUENCE_KEY = "SALE"
SALE_NUMBER_PREFIX = "SALE"


class EmptySaleError(ValidationError):
    pass


def _money(v, *, field: str) -> Decimal:
    try:
        amt = Decimal(str(v if v not in (None, "") else "0.00"))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValidationError(f"Invalid {field}: {v!r}") from exc
    if not amt.is_finite() or amt < 0:
        raise ValidationError(f"Invalid {field}: {v!r}")
    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _clean_items(items) -> list[dict]:
    cleaned = []
    for position, raw in enumerate(items or [], start=1):
        name = str(raw.get("product_name") or "").strip()
        try:
            quantity = int(raw.get("quantity") or 0)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"item {position}: quantity must be a whole number") from exc

        # untouched rows of the sale form
        if not name and quantity <= 0:
            continue
        if not name:
            raise ValidationError(f"item {position}: product_name is required")
        if quantity <= 0:
            raise ValidationError(f"item {position}: quantity must be > 0")

        cleaned.append(
            {
                "product_name": name,
                "product_code": str(raw.get("product_code") or "").strip(),
                "quantity": quantity,
                "unit_price": _money(raw.get("unit_price"), field=f"item {position} unit_price"),
                "unit_cost": _money(raw.get("unit_cost"), field=f"item {position} unit_cost"),
            }
        )

    if not cleaned:
        raise EmptySaleError("A sale needs at least one item")
    return cleaned


@transaction.atomic
def _create_sale(session, *, items, sale_date, customer_name, on_credit, status, notes) -> Sale:
    sale_number = next_number(
        session.company,
        key=SALE_SEQUENCE_KEY,
        prefix=SALE_NUMBER_PREFIX,
    )

    user = session.user if getattr(session.user, "is_authenticated", False) else None
    try:
        sale = Sale.objects.create(
            company=session.company,
            activity=session.activity,
            sale_number=sale_number,
            sale_date=sale_date or timezone.localdate(),
            customer_name=(customer_name or "").strip(),
            status=status,
            on_credit=bool(on_credit),
            notes=(notes or "").strip(),
            created_by=user,
        )

        total = Decimal("0.00")
        for item in items:
            sale_item = SaleItem.objects.create(sale=sale, **item)
            total += sale_item.total_price
    except DjangoValidationError as exc:
        raise ValidationError("; ".join(exc.messages)) from exc

    sale.total_amount = total
    sale.save(update_fields=["total_amount", "updated_at"])
    return sale


def post_sale(session, *, sale: Sale) -> bool:
    """
    Post whatever is still missing for a postable sale (revenue, then COGS).
    Safe to call again: SALE:<id> / SALE-COGS:<id> keys make it idempotent.
    """
    if not sale.is_postable:
        return False

    def _post():
        updates = {}
        if sale.journal_entry_id is None:
            entry = post_sale_to_ledger(session, sale=sale)
            updates["journal_entry"] = entry
        if sale.cogs_journal_entry_id is None:
            cogs_entry = post_sale_cogs_to_ledger(session, sale=sale)
            if cogs_entry is not None:
                updates["cogs_journal_entry"] = cogs_entry
        if updates:
            Sale.objects.filter(pk=sale.pk).update(**updates)
            for field, value in updates.items():
                setattr(sale, field, value)

    return post_business_event(sale, kind="sale", post=_post)


def record_sale(
    session,
    *,
    items,
    sale_date=None,
    customer_name: str = "",
    on_credit: bool = False,
    status: str = Sale.STATUS_IN_PROGRESS,
    notes: str = "",
) -> Sale:
    status = (status or Sale.STATUS_IN_PROGRESS).strip().lower()
    validate_initial_status(status)

    sale = _create_sale(
        session,
        items=_clean_items(items),
        sale_date=sale_date,
        customer_name=customer_name,
        on_credit=on_credit,
        status=status,
        notes=notes,
    )
    logger.info(
        "Recorded sale %s total=%s status=%s company=%s",
        sale.sale_number,
        sale.total_amount,
        sale.status,
        session.company_id,
    )

    post_sale(session, sale=sale)
    return sale


def change_sale_status(session, *, sale: Sale, status: str) -> Sale:
    if sale.company_id != session.company_id:
        raise ValidationError("Sale does not belong to this company")

    status = (status or "").strip().lower()

    with transaction.atomic():
        locked = Sale.objects.select_for_update().get(pk=sale.pk)
        validate_transition(sale=locked, target_status=status)
        locked.status = status
        locked.save(update_fields=["status", "updated_at"])

    logger.info("Sale %s -> %s company=%s", locked.sale_number, status, session.company_id)

    if locked.is_postable and locked.posting_status != PostingStatus.POSTED:
        post_sale(session, sale=locked)
    return locked
