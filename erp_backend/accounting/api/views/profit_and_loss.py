# accounting/api/views/profit_and_loss.py

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.errors import HANDLED_ERRORS, error_response
from accounting.services.profit_and_loss_service import build_profit_and_loss
from companies.permissions import CAP_ACCOUNTING_VIEW, HasCapability
from companies.session import resolve_session


class ProfitAndLossView(APIView):
    """
    Income statement for an inclusive entry-date range.
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ACCOUNTING_VIEW

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(name="start_date", type=OpenApiTypes.DATE, required=False),
            OpenApiParameter(name="end_date", type=OpenApiTypes.DATE, required=False),
        ],
        responses={200: dict},
    )
    def get(self, request):
        session = resolve_session(request)
        try:
            payload = build_profit_and_loss(
                session.company,
                request.query_params.get("start_date"),
                request.query_params.get("end_date"),
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)
        return Response(payload, status=status.HTTP_200_OK)
