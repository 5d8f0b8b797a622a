"""
SALE LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Sale entities.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from accounting.services.exceptions import ValidationError
from sales.models import Sale

# ============================================================
# DOMAIN ERRORS
# ============================================================


class SaleLifecycleError(ValidationError):
    pass


class InvalidSaleTransitionError(SaleLifecycleError):
    pass


# ============================================================
# STATE DEFINITIONS
# ============================================================

TERMINAL_STATES = {
    Sale.STATUS_PAID,
    Sale.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Sale.STATUS_IN_PROGRESS: {
        Sale.STATUS_DELIVERED,
        Sale.STATUS_PAID,
        Sale.STATUS_CANCELLED,
    },
    Sale.STATUS_DELIVERED: {
        Sale.STATUS_PAID,
    },
}

INITIAL_STATES = {
    Sale.STATUS_IN_PROGRESS,
    Sale.STATUS_DELIVERED,
    Sale.STATUS_PAID,
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, sale: Sale, target_status: str):
    if not can_transition(
        from_status=sale.status,
        to_status=target_status,
    ):
        raise InvalidSaleTransitionError(
            f"Sale {sale.sale_number} cannot transition from "
            f"'{sale.status}' to '{target_status}'"
        )


def validate_initial_status(status: str):
    if status not in INITIAL_STATES:
        raise InvalidSaleTransitionError(
            f"A sale cannot be recorded with status '{status}'"
        )
