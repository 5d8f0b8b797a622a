# PATH: accounting/services/account_resolver.py

"""
ACCOUNT RESOLVER (AUTHORITATIVE)

This module answers ONE question:
"Which account should be used for this purpose, in this company?"

Two explicit maps, no name matching:
- semantic keys (CASH, SALES_REVENUE, ...) -> account code, from
  settings.ACCOUNTING_SEMANTIC_ACCOUNTS
- expense category code -> account, from the ExpenseCategoryAccount table

Design goals:
- deterministic
- company-safe (lookups always filter by company)
- hard-fail on missing setup (so we never post to the wrong account, and
  never silently skip a posting)
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.db import transaction

from accounting.expense_categories import CATEGORY_CODES
from accounting.models.account import Account
from accounting.models.expense import ExpenseCategoryAccount
from accounting.services.exceptions import MissingAccountError, ValidationError

logger = logging.getLogger(__name__)

CASH = "CASH"
BANK = "BANK"
RECEIVABLE = "RECEIVABLE"
INVENTORY = "INVENTORY"
PAYABLE = "PAYABLE"
SALES_REVENUE = "SALES_REVENUE"
COGS = "COGS"

DEFAULT_SEMANTIC_CODES = {
    CASH: "571000",
    BANK: "521000",
    RECEIVABLE: "411000",
    INVENTORY: "371000",
    PAYABLE: "401000",
    SALES_REVENUE: "700000",
    COGS: "603000",
}


def semantic_codes() -> dict[str, str]:
    codes = dict(DEFAULT_SEMANTIC_CODES)
    codes.update(getattr(settings, "ACCOUNTING_SEMANTIC_ACCOUNTS", None) or {})
    return codes


def _resolve_code(semantic_key: str) -> str:
    semantic_key = (semantic_key or "").strip().upper()
    if not semantic_key:
        raise MissingAccountError("semantic_key is required")

    code = (semantic_codes().get(semantic_key) or "").strip()
    if not code:
        raise MissingAccountError(
            f"Missing mapping for semantic key '{semantic_key}'. "
            "Set it in ACCOUNTING_SEMANTIC_ACCOUNTS."
        )
    return code


def get_account_by_code(company, code: str) -> Account:
    code = (code or "").strip()
    if not code:
        raise MissingAccountError("Account code is required")

    try:
        return Account.objects.get(company=company, code=code, is_active=True)
    except Account.DoesNotExist as exc:
        raise MissingAccountError(
            f"Account with code={code} not found (or inactive) in company {company.pk}. "
            "Run `manage.py seed_chart` or create the account."
        ) from exc


def resolve_semantic_account(company, semantic_key: str) -> Account:
    return get_account_by_code(company, _resolve_code(semantic_key))


def get_cash_account(company) -> Account:
    return resolve_semantic_account(company, CASH)


def get_bank_account(company) -> Account:
    return resolve_semantic_account(company, BANK)


def get_receivable_account(company) -> Account:
    return resolve_semantic_account(company, RECEIVABLE)


def get_inventory_account(company) -> Account:
    return resolve_semantic_account(company, INVENTORY)


def get_payable_account(company) -> Account:
    return resolve_semantic_account(company, PAYABLE)


def get_sales_revenue_account(company) -> Account:
    return resolve_semantic_account(company, SALES_REVENUE)


def get_cogs_account(company) -> Account:
    return resolve_semantic_account(company, COGS)


# ------------------------------------------------------------
# EXPENSE CATEGORY MAP
# ------------------------------------------------------------


def get_expense_category_account(company, category: str) -> Account:
    category = (category or "").strip()
    mapping = (
        ExpenseCategoryAccount.objects.select_related("account")
        .filter(company=company, category=category)
        .first()
    )
    if mapping is None:
        raise MissingAccountError(
            f"No account is mapped to expense category '{category}' in company {company.pk}"
        )
    if not mapping.account.is_active:
        raise MissingAccountError(
            f"Account {mapping.account.code} mapped to expense category '{category}' is inactive"
        )
    return mapping.account


@transaction.atomic
def configure_expense_category(session, *, category: str, account) -> ExpenseCategoryAccount:
    """
    Create or replace the account mapped to an expense category.
    Validates now so the mapping cannot fail later at posting time.
    """
    category = (category or "").strip()
    if category not in CATEGORY_CODES:
        raise ValidationError(f"Unknown expense category '{category}'")

    if not isinstance(account, Account):
        try:
            account = Account.objects.get(company=session.company, id=int(account))
        except (Account.DoesNotExist, TypeError, ValueError) as exc:
            raise ValidationError(f"Account {account!r} not found in this company") from exc

    if account.company_id != session.company_id:
        raise ValidationError("Account does not belong to this company")
    if account.account_type != Account.EXPENSE:
        raise ValidationError(f"Account {account.code} is not an EXPENSE account")
    if not account.is_active:
        raise ValidationError(f"Account {account.code} is inactive")

    mapping, created = ExpenseCategoryAccount.objects.update_or_create(
        company=session.company,
        category=category,
        defaults={"account": account},
    )
    logger.info(
        "%s expense category %s -> %s company=%s",
        "Mapped" if created else "Remapped",
        category,
        account.code,
        session.company_id,
    )
    return mapping


def check_posting_setup(company) -> list[str]:
    """
    Return every problem that would make a generator raise MissingAccountError.
    An empty list means sales, purchases and all expense categories can post.
    """
    problems: list[str] = []

    for key in sorted(semantic_codes()):
        try:
            resolve_semantic_account(company, key)
        except MissingAccountError as exc:
            problems.append(f"{key}: {exc}")

    mapped = {
        m.category: m
        for m in ExpenseCategoryAccount.objects.select_related("account").filter(company=company)
    }
    for category in sorted(CATEGORY_CODES):
        mapping = mapped.get(category)
        if mapping is None:
            problems.append(f"expense category {category}: no account mapped")
        elif not mapping.account.is_active:
            problems.append(
                f"expense category {category}: account {mapping.account.code} is inactive"
            )

    return problems
