# accounting/services/reversal_service.py

"""
REVERSAL SERVICE

Posted entries are immutable; mistakes are corrected by an offsetting
entry. reverse_entry() posts the mirror image of an entry (every debit
becomes a credit on the same account and vice versa), linked through
JournalEntry.reverses.

Rules:
- An entry can be reversed once (OneToOne link + explicit check)
- A reversal cannot itself be reversed; post a new entry instead
- The reversal goes through post_entry, so it is numbered, balanced and
  idempotent (key REVERSAL:<entry id>)
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.models.journal import JournalEntry
from accounting.services.exceptions import ReversalError
from accounting.services.journal_entry_service import post_entry

logger = logging.getLogger(__name__)


def build_reversal_lines(entry: JournalEntry) -> list[dict]:
    return [
        {
            "account": line.account,
            "debit": line.credit_amount,
            "credit": line.debit_amount,
            "description": line.description,
        }
        for line in entry.lines.select_related("account").order_by("line_number")
    ]


@transaction.atomic
def reverse_entry(
    session,
    *,
    entry: JournalEntry,
    entry_date=None,
    description: str | None = None,
) -> JournalEntry:
    if entry.company_id != session.company_id:
        raise ReversalError("Entry does not belong to this company")

    locked = JournalEntry.objects.select_for_update().get(pk=entry.pk)

    if locked.reverses_id is not None:
        raise ReversalError(
            f"Entry {locked.entry_number} is itself a reversal and cannot be reversed"
        )
    if JournalEntry.objects.filter(reverses=locked).exists():
        raise ReversalError(f"Entry {locked.entry_number} has already been reversed")

    reversal = post_entry(
        session,
        lines=build_reversal_lines(locked),
        description=(description or "").strip() or f"Reversal of {locked.entry_number}",
        entry_date=entry_date or locked.entry_date,
        reference=locked.entry_number,
        idempotency_key=f"REVERSAL:{locked.pk}",
        activity=locked.activity,
        reverses=locked,
        allow_inactive_accounts=True,
    )

    logger.info(
        "Reversed journal entry %s with %s company=%s",
        locked.entry_number,
        reversal.entry_number,
        session.company_id,
    )
    return reversal
