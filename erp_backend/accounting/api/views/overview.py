# accounting/api/views/overview.py

"""
PATH: accounting/api/views/overview.py

ACCOUNTING OVERVIEW DASHBOARD (KPIs)

Read-only, computed live from the immutable ledger.
Also reports the posting setup (missing semantic accounts or category
mappings) so the dashboard can warn before a posting fails.
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import HANDLED_ERRORS, error_response
from accounting.services.account_resolver import check_posting_setup
from accounting.services.overview_service import get_accounting_overview
from companies.permissions import CAP_ACCOUNTING_VIEW, HasCapability
from companies.session import resolve_session


class AccountingOverviewView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ACCOUNTING_VIEW

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(
                name="today",
                type=OpenApiTypes.DATE,
                required=False,
                description="Reference date for month-to-date figures. Defaults to today.",
            ),
        ],
        responses={200: dict},
    )
    def get(self, request):
        session = resolve_session(request)
        try:
            payload = get_accounting_overview(session.company, request.query_params.get("today"))
        except HANDLED_ERRORS as exc:
            return error_response(exc)
        return Response(payload, status=status.HTTP_200_OK)


class PostingSetupView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ACCOUNTING_VIEW

    @extend_schema(tags=["accounting"], responses={200: dict})
    def get(self, request):
        problems = check_posting_setup(resolve_session(request).company)
        return Response({"ready": not problems, "problems": problems}, status=status.HTTP_200_OK)
