# accounting/services/chart_service.py

"""
CHART OF ACCOUNTS SERVICE

Write-side operations on a company's chart:
- create / update accounts (code unique per company, never blank)
- parent assignment with ancestor-walk cycle check
- deactivate / reactivate (soft-disable)
- delete: only for accounts no line references; otherwise deactivate

Read helper:
- list_accounts(type, active_only, search) ordered by code
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q

from accounting.models.account import Account
from accounting.services.exceptions import (
    DuplicateCodeError,
    HierarchyCycleError,
    ValidationError,
)

logger = logging.getLogger(__name__)

VALID_TYPES = {value for value, _label in Account.ACCOUNT_TYPES}

DELETED = "deleted"
DEACTIVATED = "deactivated"


def _normalize_type(account_type: str) -> str:
    value = (account_type or "").strip().upper()
    if value not in VALID_TYPES:
        raise ValidationError(
            f"account_type must be one of {', '.join(sorted(VALID_TYPES))}"
        )
    return value


def _resolve_parent(*, company, parent) -> Account | None:
    if parent is None or parent == "":
        return None
    if isinstance(parent, Account):
        if parent.company_id != company.id:
            raise ValidationError("Parent account must belong to the same company")
        return parent
    try:
        return Account.objects.get(company=company, id=int(parent))
    except (Account.DoesNotExist, TypeError, ValueError) as exc:
        raise ValidationError(f"Parent account {parent!r} not found") from exc


def _assert_no_cycle(*, account: Account, parent: Account | None) -> None:
    """
    Walk parent -> root; reaching `account` means the assignment closes a loop.
    """
    if parent is None or account.pk is None:
        return

    seen: set[int] = set()
    node = parent
    while node is not None:
        if node.pk == account.pk:
            raise HierarchyCycleError(
                f"Setting {parent.code} as parent of {account.code} would create a cycle"
            )
        if node.pk in seen:
            raise HierarchyCycleError(f"Existing hierarchy above {parent.code} is cyclic")
        seen.add(node.pk)
        node = node.parent


def _code_taken(*, company, code: str, exclude_pk=None) -> bool:
    qs = Account.objects.filter(company=company, code=code)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    return qs.exists()


def create_account(
    session,
    *,
    code: str,
    name: str,
    account_type: str,
    parent=None,
    is_active: bool = True,
) -> Account:
    company = session.company

    code = (code or "").strip()
    name = (name or "").strip()
    if not code:
        raise ValidationError("Account code is required")
    if not name:
        raise ValidationError("Account name is required")

    account_type = _normalize_type(account_type)
    parent_account = _resolve_parent(company=company, parent=parent)

    if _code_taken(company=company, code=code):
        raise DuplicateCodeError(f"Account code {code} already exists in your company")

    try:
        with transaction.atomic():
            account = Account.objects.create(
                company=company,
                code=code,
                name=name,
                account_type=account_type,
                parent=parent_account,
                is_active=is_active,
            )
    except IntegrityError as exc:
        if _code_taken(company=company, code=code):
            raise DuplicateCodeError(
                f"Account code {code} already exists in your company"
            ) from exc
        raise

    logger.info("Created account %s (%s) company=%s", code, account_type, company.pk)
    return account


@transaction.atomic
def set_account_parent(session, *, account: Account, parent) -> Account:
    if account.company_id != session.company_id:
        raise ValidationError("Account does not belong to this company")

    parent_account = _resolve_parent(company=session.company, parent=parent)
    _assert_no_cycle(account=account, parent=parent_account)

    account.parent = parent_account
    account.save(update_fields=["parent", "updated_at"])
    return account


@transaction.atomic
def update_account(session, *, account: Account, name: str | None = None, **kwargs) -> Account:
    """
    Rename and/or re-parent. Code and type are fixed once lines reference
    the account.
    """
    if account.company_id != session.company_id:
        raise ValidationError("Account does not belong to this company")

    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Account name is required")
        account.name = name
        account.save(update_fields=["name", "updated_at"])

    if "parent" in kwargs:
        set_account_parent(session, account=account, parent=kwargs["parent"])

    return account


def deactivate_account(session, *, account: Account) -> Account:
    if account.company_id != session.company_id:
        raise ValidationError("Account does not belong to this company")

    if account.is_active:
        account.is_active = False
        account.save(update_fields=["is_active", "updated_at"])
        logger.info("Deactivated account %s company=%s", account.code, account.company_id)
    return account


def reactivate_account(session, *, account: Account) -> Account:
    if account.company_id != session.company_id:
        raise ValidationError("Account does not belong to this company")

    if not account.is_active:
        account.is_active = True
        account.save(update_fields=["is_active", "updated_at"])
    return account


def is_account_referenced(account: Account) -> bool:
    return (
        account.journal_lines.exists()
        or account.children.exists()
        or account.expense_categories.exists()
    )


@transaction.atomic
def delete_account(session, *, account: Account) -> str:
    """
    Hard-delete an unreferenced account; soft-disable a referenced one.
    Returns DELETED or DEACTIVATED.
    """
    if account.company_id != session.company_id:
        raise ValidationError("Account does not belong to this company")

    if is_account_referenced(account):
        deactivate_account(session, account=account)
        return DEACTIVATED

    code = account.code
    account.delete()
    logger.info("Deleted unreferenced account %s company=%s", code, session.company_id)
    return DELETED


def list_accounts(
    company,
    *,
    account_type: str | None = None,
    active_only: bool = False,
    search: str | None = None,
):
    qs = Account.objects.filter(company=company)

    if account_type:
        qs = qs.filter(account_type=_normalize_type(account_type))
    if active_only:
        qs = qs.filter(is_active=True)

    search = (search or "").strip()
    if search:
        qs = qs.filter(Q(code__icontains=search) | Q(name__icontains=search))

    return qs.order_by("code")
