# companies/permissions.py

"""
ROLE → CAPABILITY PERMISSIONS (TENANT-SCOPED)

Roles live on Membership, so they are per company. Views protect
capabilities, not raw roles:

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ACCOUNTING_POST

A view may also declare a per-method map:

    required_capabilities = {"GET": CAP_ACCOUNTING_VIEW, "POST": CAP_ACCOUNTING_POST}

Superusers hold every capability, but still need a membership to get a
tenant session.
"""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from companies.models import Membership
from companies.session import TenantSessionError, resolve_session

CAP_ACCOUNTING_VIEW = "accounting.view"
CAP_ACCOUNTING_POST = "accounting.post"
CAP_ACCOUNTING_CHART = "accounting.chart"
CAP_SALES_RECORD = "sales.record"
CAP_PURCHASES_RECORD = "purchases.record"
CAP_EXPENSES_RECORD = "expenses.record"

ALL_CAPABILITIES = {
    CAP_ACCOUNTING_VIEW,
    CAP_ACCOUNTING_POST,
    CAP_ACCOUNTING_CHART,
    CAP_SALES_RECORD,
    CAP_PURCHASES_RECORD,
    CAP_EXPENSES_RECORD,
}

ROLE_CAPABILITIES: dict[str, set[str]] = {
    Membership.ROLE_OWNER: {*ALL_CAPABILITIES},
    Membership.ROLE_ADMIN: {*ALL_CAPABILITIES},
    Membership.ROLE_ACCOUNTANT: {
        CAP_ACCOUNTING_VIEW,
        CAP_ACCOUNTING_POST,
        CAP_ACCOUNTING_CHART,
        CAP_EXPENSES_RECORD,
    },
    Membership.ROLE_SELLER: {
        CAP_SALES_RECORD,
    },
    Membership.ROLE_STOCK_MANAGER: {
        CAP_PURCHASES_RECORD,
    },
}


def capabilities_for(user, role: str) -> set[str]:
    if getattr(user, "is_superuser", False):
        return set(ALL_CAPABILITIES)
    return set(ROLE_CAPABILITIES.get(role, set()))


class HasTenantSession(BasePermission):
    """
    Require a resolvable tenant session (active membership).
    """

    message = "No active company membership for this user."

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        try:
            resolve_session(request)
        except TenantSessionError as exc:
            self.message = str(exc)
            return False
        return True


class HasCapability(HasTenantSession):
    """
    Require a tenant session whose role grants the view's capability.
    Deny-by-default when the view declares none.
    Methods the view does not serve are let through so DRF answers 405.
    """

    message = "You do not have permission to perform this action."

    def _required_for(self, request, view) -> str | None:
        per_method = getattr(view, "required_capabilities", None) or {}
        if request.method in per_method:
            return per_method[request.method]
        if request.method in ("HEAD", "OPTIONS") and "GET" in per_method:
            return per_method["GET"]
        return getattr(view, "required_capability", None)

    @staticmethod
    def _view_serves(request, view) -> bool:
        method = request.method.lower()
        return method in view.http_method_names and hasattr(view, method)

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False

        if not self._view_serves(request, view):
            return True

        required = self._required_for(request, view)
        if not required:
            return False

        session = resolve_session(request)
        if required not in capabilities_for(request.user, session.role):
            self.message = "You do not have permission to perform this action."
            return False
        return True
