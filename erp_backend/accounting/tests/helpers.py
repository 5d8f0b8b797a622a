# accounting/tests/helpers.py

"""
Shared fixtures for accounting tests: a company with a member, a tenant
session, and a seeded chart with the semantic accounts.
"""

from __future__ import annotations

from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command

from accounting.models.account import Account
from companies.models import Activity, Company, Membership
from companies.session import TenantSession

User = get_user_model()


def make_company(name="Acme SARL", *, username="owner", role=Membership.ROLE_OWNER):
    company = Company.objects.create(name=name)
    activity = Activity.objects.create(company=company, name=f"{name} shop")
    user = User.objects.create_user(username=f"{username}-{company.pk}", password="pass")
    membership = Membership.objects.create(
        user=user, company=company, activity=activity, role=role
    )
    return company, activity, user, membership


def make_session(company, *, user=None, activity=None, role=Membership.ROLE_OWNER) -> TenantSession:
    return TenantSession(company=company, user=user, activity=activity, role=role)


def seed_chart(company) -> dict[str, Account]:
    call_command("seed_chart", company=company.pk, stdout=StringIO())
    return {a.code: a for a in Account.objects.filter(company=company)}

