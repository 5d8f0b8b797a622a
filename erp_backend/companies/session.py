# companies/session.py

"""
TENANT SESSION

The session is a plain value object built once per request and passed
explicitly into services. Nothing here is cached at module level.

Resolution rules:
- The user must be authenticated and hold an active membership in an
  active company.
- With several memberships, the X-Company-Id header picks one; without it
  the oldest membership wins.
- The activity comes from the membership default, unless an
  X-Activity-Id header names another activity of the same company.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from companies.models import Activity, Company, Membership

logger = logging.getLogger(__name__)

COMPANY_HEADER = "HTTP_X_COMPANY_ID"
ACTIVITY_HEADER = "HTTP_X_ACTIVITY_ID"


class TenantSessionError(Exception):
    """Raised when no tenant context can be resolved for a user."""


@dataclass(frozen=True)
class TenantSession:
    company: Company
    user: object = None
    activity: Activity | None = None
    role: str = ""

    @property
    def company_id(self) -> int:
        return self.company.id

    @property
    def activity_id(self) -> int | None:
        return self.activity.id if self.activity is not None else None

    def with_activity(self, activity: Activity | None) -> "TenantSession":
        if activity is not None and activity.company_id != self.company.id:
            raise TenantSessionError("Activity does not belong to the session company")
        return TenantSession(
            company=self.company, user=self.user, activity=activity, role=self.role
        )


def _parse_id(raw) -> int | None:
    if raw in (None, ""):
        return None
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError) as exc:
        raise TenantSessionError(f"Invalid identifier: {raw!r}") from exc


def session_for_membership(membership: Membership) -> TenantSession:
    return TenantSession(
        company=membership.company,
        user=membership.user,
        activity=membership.activity,
        role=membership.role,
    )


def resolve_session_for_user(
    user, *, company_id: int | None = None, activity_id: int | None = None
) -> TenantSession:
    if user is None or not getattr(user, "is_authenticated", False):
        raise TenantSessionError("Authentication is required")

    qs = Membership.objects.select_related("company", "activity", "user").filter(
        user=user,
        is_active=True,
        company__is_active=True,
    )
    if company_id is not None:
        qs = qs.filter(company_id=company_id)

    membership = qs.order_by("created_at", "id").first()
    if membership is None:
        if company_id is not None:
            raise TenantSessionError(f"No active membership for company {company_id}")
        raise TenantSessionError("User does not belong to any active company")

    session = session_for_membership(membership)

    if activity_id is not None:
        try:
            activity = Activity.objects.get(
                id=activity_id, company=membership.company, is_active=True
            )
        except Activity.DoesNotExist as exc:
            raise TenantSessionError(
                f"Activity {activity_id} not found in company {membership.company_id}"
            ) from exc
        session = session.with_activity(activity)

    return session


def resolve_session(request) -> TenantSession:
    """
    Build (and memoize on the request) the tenant session for an API call.
    """
    cached = getattr(request, "_tenant_session", None)
    if cached is not None:
        return cached

    meta = getattr(request, "META", {}) or {}
    session = resolve_session_for_user(
        getattr(request, "user", None),
        company_id=_parse_id(meta.get(COMPANY_HEADER)),
        activity_id=_parse_id(meta.get(ACTIVITY_HEADER)),
    )

    logger.debug(
        "Resolved tenant session user=%s company=%s activity=%s",
        getattr(session.user, "pk", None),
        session.company_id,
        session.activity_id,
    )
    request._tenant_session = session
    return session
