"""
======================================================
PATH: purchases/services/purchase_service.py
======================================================
PURCHASE SERVICE

Canonical flow:
1) Create Purchase + PurchaseItems (own transaction, numbered PUR-000001...)
2) On reaching received or paid: post the ledger entry best-effort
   (Dr Inventory / Cr Cash, or Cr Payable when on_credit)

Idempotency rule:
- PURCHASE:<id> is the posting key, so a retry (repost_failed_events)
  returns the existing entry instead of double-posting.

Lifecycle:
- pending  -> received | paid | cancelled
- received -> paid
- paid, cancelled are terminal
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone

from accounting.models.business_event import PostingStatus
from accounting.services.exceptions import ValidationError
from accounting.services.posting import post_business_event, post_purchase_to_ledger
from accounting.services.sequence_service import next_number
from purchases.models import Purchase, PurchaseItem

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
PURCHASE_SEQUENCE_KEY = "PURCHASE"
PURCHASE_NUMBER_PREFIX = "PUR"

ALLOWED_TRANSITIONS = {
    Purchase.STATUS_PENDING: {
        Purchase.STATUS_RECEIVED,
        Purchase.STATUS_PAID,
        Purchase.STATUS_CANCELLED,
    },
    Purchase.STATUS_RECEIVED: {
        Purchase.STATUS_PAID,
    },
}

INITIAL_STATES = {
    Purchase.STATUS_PENDING,
    Purchase.STATUS_RECEIVED,
    Purchase.STATUS_PAID,
}


class PurchaseError(ValidationError):
    pass


class InvalidPurchaseTransitionError(PurchaseError):
    pass


def _money(v, *, field: str) -> Decimal:
    try:
        amt = Decimal(str(v if v not in (None, "") else "0.00"))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise PurchaseError(f"Invalid {field}: {v!r}") from exc
    if not amt.is_finite() or amt < 0:
        raise PurchaseError(f"Invalid {field}: {v!r}")
    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _clean_items(items) -> list[dict]:
    cleaned = []
    for position, raw in enumerate(items or [], start=1):
        name = str(raw.get("product_name") or "").strip()
        try:
            quantity = int(raw.get("quantity") or 0)
            received = int(raw.get("received_quantity") or 0)
        except (TypeError, ValueError) as exc:
            raise PurchaseError(f"item {position}: quantities must be whole numbers") from exc

        if not name and quantity <= 0:
            continue
        if not name:
            raise PurchaseError(f"item {position}: product_name is required")
        if quantity <= 0:
            raise PurchaseError(f"item {position}: quantity must be > 0")

        cleaned.append(
            {
                "product_name": name,
                "product_code": str(raw.get("product_code") or "").strip(),
                "quantity": quantity,
                "received_quantity": received,
                "unit_price": _money(raw.get("unit_price"), field=f"item {position} unit_price"),
            }
        )

    if not cleaned:
        raise PurchaseError("A purchase needs at least one item")
    return cleaned


@transaction.atomic
def _create_purchase(session, *, items, purchase_date, supplier_name, on_credit, status, notes) -> Purchase:
    number = next_number(
        session.company,
        key=PURCHASE_SEQUENCE_KEY,
        prefix=PURCHASE_NUMBER_PREFIX,
    )
    user = session.user if getattr(session.user, "is_authenticated", False) else None

    try:
        purchase = Purchase.objects.create(
            company=session.company,
            activity=session.activity,
            purchase_number=number,
            purchase_date=purchase_date or timezone.localdate(),
            supplier_name=(supplier_name or "").strip(),
            status=status,
            on_credit=bool(on_credit),
            notes=(notes or "").strip(),
            created_by=user,
        )

        total = Decimal("0.00")
        for item in items:
            if status in Purchase.POSTABLE_STATUSES and not item["received_quantity"]:
                item["received_quantity"] = item["quantity"]
            purchase_item = PurchaseItem.objects.create(purchase=purchase, **item)
            total += purchase_item.total_price
    except DjangoValidationError as exc:
        raise PurchaseError("; ".join(exc.messages)) from exc

    purchase.total_amount = total
    purchase.save(update_fields=["total_amount", "updated_at"])
    return purchase


def post_purchase(session, *, purchase: Purchase) -> bool:
    if not purchase.is_postable:
        return False

    def _post():
        if purchase.journal_entry_id is not None:
            return
        entry = post_purchase_to_ledger(session, purchase=purchase)
        Purchase.objects.filter(pk=purchase.pk).update(journal_entry=entry)
        purchase.journal_entry = entry

    return post_business_event(purchase, kind="purchase", post=_post)


def record_purchase(
    session,
    *,
    items,
    purchase_date=None,
    supplier_name: str = "",
    on_credit: bool = False,
    status: str = Purchase.STATUS_PENDING,
    notes: str = "",
) -> Purchase:
    status = (status or Purchase.STATUS_PENDING).strip().lower()
    if status not in INITIAL_STATES:
        raise InvalidPurchaseTransitionError(f"A purchase cannot be recorded with status '{status}'")

    purchase = _create_purchase(
        session,
        items=_clean_items(items),
        purchase_date=purchase_date,
        supplier_name=supplier_name,
        on_credit=on_credit,
        status=status,
        notes=notes,
    )
    logger.info(
        "Recorded purchase %s total=%s status=%s company=%s",
        purchase.purchase_number,
        purchase.total_amount,
        purchase.status,
        session.company_id,
    )

    post_purchase(session, purchase=purchase)
    return purchase


def change_purchase_status(session, *, purchase: Purchase, status: str) -> Purchase:
    if purchase.company_id != session.company_id:
        raise PurchaseError("Purchase does not belong to this company")

    status = (status or "").strip().lower()

    with transaction.atomic():
        locked = Purchase.objects.select_for_update().get(pk=purchase.pk)
        if status not in ALLOWED_TRANSITIONS.get(locked.status, set()):
            raise InvalidPurchaseTransitionError(
                f"Purchase {locked.purchase_number} cannot transition from "
                f"'{locked.status}' to '{status}'"
            )

        locked.status = status
        locked.save(update_fields=["status", "updated_at"])

        if status == Purchase.STATUS_RECEIVED:
            for item in locked.items.filter(received_quantity=0):
                item.received_quantity = item.quantity
                item.save(update_fields=["received_quantity"])

    logger.info("Purchase %s -> %s company=%s", locked.purchase_number, status, session.company_id)

    if locked.is_postable and locked.posting_status != PostingStatus.POSTED:
        post_purchase(session, purchase=locked)
    return locked
