# accounting/services/sequence_service.py

"""
SEQUENCE SERVICE

Atomic "next number for company X" allocation.

The counter row is re-fetched with select_for_update inside the
transaction, so two concurrent callers for the same company serialize on
that row. Numbers are not guaranteed gapless: a posting that rolls back
after allocation leaves a hole.
"""

from __future__ import annotations

import logging
import time

from django.conf import settings
from django.db import DatabaseError, transaction

from accounting.models.sequence import EntryNumberSequence
from accounting.services.exceptions import EntryNumberingError

logger = logging.getLogger(__name__)


def _default_prefix() -> str:
    return (getattr(settings, "ACCOUNTING_ENTRY_NUMBER_PREFIX", "ECR") or "ECR").strip()


def _default_padding() -> int:
    return int(getattr(settings, "ACCOUNTING_ENTRY_NUMBER_PADDING", 6) or 6)


@transaction.atomic
def next_number(company, *, key: str, prefix: str, padding_digits: int | None = None) -> str:
    if company is None:
        raise EntryNumberingError("company is required for number allocation")

    try:
        sequence, created = EntryNumberSequence.objects.get_or_create(
            company=company,
            key=key,
            defaults={
                "prefix": prefix,
                "padding_digits": padding_digits or _default_padding(),
                "last_number": 0,
            },
        )
        if created:
            logger.info(
                "Created number sequence company=%s key=%s prefix=%s",
                company.pk,
                key,
                prefix,
            )

        locked = EntryNumberSequence.objects.select_for_update().get(pk=sequence.pk)
        locked.last_number += 1
        locked.save(update_fields=["last_number", "updated_at"])
    except DatabaseError as exc:
        raise EntryNumberingError(
            f"Failed to allocate a {key} number for company {company.pk}: {exc}"
        ) from exc

    return locked.format_number(locked.last_number)


def next_entry_number(company) -> str:
    return next_number(
        company,
        key=EntryNumberSequence.KEY_JOURNAL,
        prefix=_default_prefix(),
    )


def fallback_entry_number() -> str:
    return f"{_default_prefix()}-{int(time.time() * 1000)}"
