"""
PATH: accounting/api/views/trial_balance.py

TRIAL BALANCE API VIEW (READ-ONLY)

GET /api/accounting/trial-balance/?as_of=YYYY-MM-DD

- Requires a tenant session with accounting.view
- Company isolation: the session company is the only company reported on
"""

from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import HANDLED_ERRORS, error_response
from accounting.services.balance_service import get_trial_balance
from companies.permissions import CAP_ACCOUNTING_VIEW, HasCapability
from companies.session import resolve_session


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="as_of",
            type=OpenApiTypes.DATE,
            location=OpenApiParameter.QUERY,
            required=False,
            description="Optional cutoff date (YYYY-MM-DD), inclusive.",
        ),
    ],
    responses={200: dict},
)
class TrialBalanceView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ACCOUNTING_VIEW

    def get(self, request):
        session = resolve_session(request)
        try:
            payload = get_trial_balance(session.company, request.query_params.get("as_of"))
        except HANDLED_ERRORS as exc:
            return error_response(exc)
        return Response(payload, status=status.HTTP_200_OK)
