# PATH: accounting/api/views/balance_sheet.py

"""
PATH: accounting/api/views/balance_sheet.py

BALANCE SHEET API VIEW

Read-only endpoint exposing the balance sheet snapshot of the session
company. An empty chart renders zeros.
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import HANDLED_ERRORS, error_response
from accounting.services.balance_sheet_service import build_balance_sheet
from companies.permissions import CAP_ACCOUNTING_VIEW, HasCapability
from companies.session import resolve_session


class BalanceSheetView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ACCOUNTING_VIEW

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(
                name="as_of",
                type=OpenApiTypes.DATE,
                required=False,
                description="Optional cutoff date (YYYY-MM-DD), inclusive.",
            ),
        ],
        responses={200: dict},
    )
    def get(self, request):
        session = resolve_session(request)
        try:
            payload = build_balance_sheet(session.company, request.query_params.get("as_of"))
        except HANDLED_ERRORS as exc:
            return error_response(exc)
        return Response(payload, status=status.HTTP_200_OK)
