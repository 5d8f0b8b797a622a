# accounting/services/journal_entry_service.py

"""
======================================================
PATH: accounting/services/journal_entry_service.py
======================================================
JOURNAL ENTRY SERVICE (ACCOUNTING ENGINE)

This module is the ONLY place allowed to:
- Create JournalEntry
- Create JournalEntryLine
- Enforce debit == credit
- Guarantee atomicity (header + lines, or nothing)
- Allocate entry numbers
- Enforce idempotency via caller-supplied keys (prevents double-posting)

Everything else (sales, purchases, expenses, manual entries, reversals)
must pass through post_entry().

Line input:
    {"account": <Account> | "account_id": <id>, "debit": ..., "credit": ..., "description": ""}

Validation order (all before any write):
1. per line: blank rows (no account, no amount) are dropped; then
   invalid/negative/oversized amount, missing account, both sides, neither side
2. at least 2 qualifying lines
3. total debit > 0
4. totals fit the amount columns (MAX_AMOUNT)
5. |total debit - total credit| < 0.01
6. every account exists in the session company and is active
"""

from __future__ import annotations

import hashlib
import json
import logging
import warnings
from datetime import date as date_cls
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import IntegrityError, transaction
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalEntryLine
from accounting.services.exceptions import (
    EmptyLineError,
    EntryNumberingError,
    IdempotencyError,
    InactiveAccountError,
    InsufficientLinesError,
    MixedLineError,
    NumberingFallbackWarning,
    UnbalancedEntryError,
    UnknownAccountError,
    ValidationError,
    ZeroAmountError,
)
from accounting.services.sequence_service import fallback_entry_number, next_entry_number

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
BALANCE_TOLERANCE = Decimal("0.01")
MIN_LINES = 2
# DecimalField(max_digits=14, decimal_places=2) on lines and entry totals
MAX_AMOUNT = Decimal("999999999999.99")


def _money(value, *, line_number: int | None = None) -> Decimal:
    if value is None or value == "":
        return Decimal("0.00")

    if isinstance(value, Decimal):
        amt = value
    else:
        try:
            amt = Decimal(str(value).strip())
        except (InvalidOperation, ValueError, TypeError) as exc:
            raise ValidationError(f"invalid amount {value!r}", line_number=line_number) from exc

    if not amt.is_finite():
        raise ValidationError(f"invalid amount {value!r}", line_number=line_number)

    return amt.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _coerce_entry_date(entry_date) -> date_cls:
    if entry_date is None:
        return timezone.localdate()
    if isinstance(entry_date, date_cls):
        return entry_date
    try:
        return date_cls.fromisoformat(str(entry_date).strip())
    except ValueError as exc:
        raise ValidationError("entry_date must be a date (YYYY-MM-DD)") from exc


def _account_ref(raw: dict):
    account = raw.get("account")
    if account is None or account == "":
        account = raw.get("account_id")
    if account == "":
        return None
    return account


def _check_line_shapes(lines) -> list[dict]:
    if lines is None:
        lines = []
    if isinstance(lines, (str, bytes, dict)):
        raise ValidationError("lines must be a list of line objects")

    shaped: list[dict] = []
    for line_number, raw in enumerate(lines, start=1):
        if not isinstance(raw, dict):
            raise ValidationError("each line must be an object", line_number=line_number)

        account = _account_ref(raw)
        debit = _money(raw.get("debit"), line_number=line_number)
        credit = _money(raw.get("credit"), line_number=line_number)

        if account is None and debit == 0 and credit == 0:
            # untouched row of an entry form
            continue

        if debit < 0 or credit < 0:
            raise ValidationError("amounts cannot be negative", line_number=line_number)
        if debit > MAX_AMOUNT or credit > MAX_AMOUNT:
            raise ValidationError(
                f"amount exceeds the maximum of {MAX_AMOUNT}", line_number=line_number
            )
        if account is None:
            raise ValidationError("an account is required", line_number=line_number)
        if debit > 0 and credit > 0:
            raise MixedLineError(
                "cannot have both a debit and a credit", line_number=line_number
            )
        if debit == 0 and credit == 0:
            raise EmptyLineError(
                "enter either a debit or a credit", line_number=line_number
            )

        shaped.append(
            {
                "line_number": line_number,
                "account": account,
                "debit": debit,
                "credit": credit,
                "description": str(raw.get("description") or "").strip()[:255],
            }
        )

    return shaped


def _check_totals(shaped: list[dict]) -> tuple[Decimal, Decimal]:
    if len(shaped) < MIN_LINES:
        raise InsufficientLinesError(
            f"a journal entry needs at least {MIN_LINES} lines with an amount "
            f"(got {len(shaped)})"
        )

    total_debit = sum((line["debit"] for line in shaped), Decimal("0.00"))
    total_credit = sum((line["credit"] for line in shaped), Decimal("0.00"))

    if total_debit == 0:
        raise ZeroAmountError("a journal entry must carry a non-zero debit total")

    if total_debit > MAX_AMOUNT or total_credit > MAX_AMOUNT:
        raise ValidationError(
            f"entry total exceeds the maximum of {MAX_AMOUNT} "
            f"(debits={total_debit} credits={total_credit})"
        )

    if abs(total_debit - total_credit) >= BALANCE_TOLERANCE:
        raise UnbalancedEntryError(total_debit, total_credit)

    return total_debit, total_credit


def _resolve_accounts(*, company, shaped: list[dict], allow_inactive: bool = False) -> None:
    wanted_ids = set()
    for line in shaped:
        ref = line["account"]
        if isinstance(ref, Account):
            continue
        try:
            wanted_ids.add(int(ref))
        except (TypeError, ValueError) as exc:
            raise UnknownAccountError(
                f"invalid account reference {ref!r}", line_number=line["line_number"]
            ) from exc

    by_id = {
        acc.id: acc
        for acc in Account.objects.filter(company=company, id__in=wanted_ids)
    }

    for line in shaped:
        ref = line["account"]
        if isinstance(ref, Account):
            account = ref if ref.company_id == company.id else None
        else:
            account = by_id.get(int(ref))

        if account is None:
            raise UnknownAccountError(
                "account not found in this company", line_number=line["line_number"]
            )
        if not account.is_active and not allow_inactive:
            raise InactiveAccountError(
                f"account {account.code} is inactive", line_number=line["line_number"]
            )
        line["account"] = account


def validate_lines(
    *, company, lines, allow_inactive: bool = False
) -> tuple[list[dict], Decimal, Decimal]:
    """
    Normalize and validate entry lines without writing anything.

    Returns (normalized_lines, total_debit, total_credit).
    Raises a ValidationError subclass naming the offending line and rule.
    """
    shaped = _check_line_shapes(lines)
    total_debit, total_credit = _check_totals(shaped)
    _resolve_accounts(company=company, shaped=shaped, allow_inactive=allow_inactive)
    return shaped, total_debit, total_credit


def _fingerprint(*, entry_date, description, reference, normalized) -> str:
    payload = {
        "entry_date": entry_date.isoformat(),
        "description": description,
        "reference": reference,
        "lines": [
            [line["account"].id, str(line["debit"]), str(line["credit"])]
            for line in normalized
        ],
    }
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def _existing_for_key(*, company, idempotency_key: str, fingerprint: str) -> JournalEntry | None:
    existing = JournalEntry.objects.filter(
        company=company, idempotency_key=idempotency_key
    ).first()
    if existing is None:
        return None
    if existing.payload_fingerprint != fingerprint:
        raise IdempotencyError(
            f"Idempotency key {idempotency_key!r} was already used for entry "
            f"{existing.entry_number} with different content"
        )
    logger.info(
        "Idempotent replay company=%s key=%s entry=%s",
        company.pk,
        idempotency_key,
        existing.entry_number,
    )
    return existing


def _allocate_entry_number(company) -> tuple[str, bool]:
    try:
        with transaction.atomic():
            return next_entry_number(company), False
    except EntryNumberingError as exc:
        number = fallback_entry_number()
        logger.warning(
            "Entry number sequence failed for company=%s, using fallback %s: %s",
            company.pk,
            number,
            exc,
        )
        warnings.warn(
            f"Entry number sequence unavailable; fallback number {number} used",
            NumberingFallbackWarning,
            stacklevel=3,
        )
        return number, True


def _actor(session):
    user = getattr(session, "user", None)
    if user is not None and getattr(user, "is_authenticated", False):
        return user
    return None


def post_entry(
    session,
    *,
    lines,
    description: str,
    entry_date=None,
    reference: str = "",
    idempotency_key: str | None = None,
    activity=None,
    reverses: JournalEntry | None = None,
    allow_inactive_accounts: bool = False,
) -> JournalEntry:
    """
    Validate and persist one balanced journal entry for session.company.

    Header and lines are written in a single transaction. With an
    idempotency_key, a retry carrying the same content returns the entry
    created by the first call.
    """
    company = session.company

    description = (description or "").strip()
    if not description:
        raise ValidationError("description is required")

    reference = (reference or "").strip()[:100]
    idempotency_key = (str(idempotency_key).strip() if idempotency_key else "") or None
    entry_date = _coerce_entry_date(entry_date)
    activity = activity if activity is not None else session.activity

    normalized, total_debit, total_credit = validate_lines(
        company=company, lines=lines, allow_inactive=allow_inactive_accounts
    )
    fingerprint = _fingerprint(
        entry_date=entry_date,
        description=description,
        reference=reference,
        normalized=normalized,
    )

    with transaction.atomic():
        if idempotency_key:
            existing = _existing_for_key(
                company=company, idempotency_key=idempotency_key, fingerprint=fingerprint
            )
            if existing is not None:
                return existing

        entry_number, used_fallback = _allocate_entry_number(company)

        try:
            with transaction.atomic():
                entry = JournalEntry.objects.create(
                    company=company,
                    activity=activity,
                    entry_number=entry_number,
                    numbering_fallback=used_fallback,
                    entry_date=entry_date,
                    description=description,
                    reference=reference,
                    idempotency_key=idempotency_key,
                    payload_fingerprint=fingerprint,
                    total_debit=total_debit,
                    total_credit=total_credit,
                    reverses=reverses,
                    created_by=_actor(session),
                )
        except IntegrityError as exc:
            if idempotency_key:
                existing = _existing_for_key(
                    company=company,
                    idempotency_key=idempotency_key,
                    fingerprint=fingerprint,
                )
                if existing is not None:
                    return existing
            raise

        JournalEntryLine.objects.bulk_create(
            [
                JournalEntryLine(
                    journal_entry=entry,
                    account=line["account"],
                    line_number=position,
                    description=line["description"],
                    debit_amount=line["debit"],
                    credit_amount=line["credit"],
                )
                for position, line in enumerate(normalized, start=1)
            ]
        )

    logger.info(
        "Posted journal entry %s company=%s date=%s debit=%s credit=%s lines=%s",
        entry.entry_number,
        company.pk,
        entry.entry_date,
        total_debit,
        total_credit,
        len(normalized),
    )
    return entry
