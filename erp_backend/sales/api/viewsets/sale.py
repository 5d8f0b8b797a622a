# sales/api/viewsets/sale.py

"""
======================================================
PATH: sales/api/viewsets/sale.py
======================================================
SALE VIEWSET (STAFF)

Purpose:
- Sales history: list + retrieve with basic filters
  (?status=, ?posting_status=, ?date_from=, ?date_to=)
- Record a sale (items + initial status)
- Move a sale through its lifecycle (status action)
- Retry a failed accounting posting (repost action)

Security:
- Requires IsAuthenticated + tenant session
- Requires sales.record

Accounting rules:
- A sale reaching delivered or paid is posted best-effort; a posting
  failure never fails the request (posting_status=FAILED in the body)
======================================================
"""

from __future__ import annotations

from django.utils.dateparse import parse_date
from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import HANDLED_ERRORS, error_response
from companies.permissions import CAP_SALES_RECORD, HasCapability
from companies.session import resolve_session
from sales.models import Sale
from sales.serializers.sale import SaleCreateSerializer, SaleSerializer, SaleStatusSerializer
from sales.services.sale_service import change_sale_status, post_sale, record_sale


@extend_schema(tags=["sales"])
class SaleViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_SALES_RECORD
    serializer_class = SaleSerializer

    def get_queryset(self):
        session = resolve_session(self.request)
        qs = (
            Sale.objects.filter(company=session.company)
            .select_related("journal_entry", "cogs_journal_entry")
            .prefetch_related("items")
        )

        qp = self.request.query_params
        if qp.get("status"):
            qs = qs.filter(status=qp["status"])
        if qp.get("posting_status"):
            qs = qs.filter(posting_status=qp["posting_status"].upper())

        date_from = parse_date(qp.get("date_from") or "")
        date_to = parse_date(qp.get("date_to") or "")
        if date_from:
            qs = qs.filter(sale_date__gte=date_from)
        if date_to:
            qs = qs.filter(sale_date__lte=date_to)

        return qs.order_by("-sale_date", "-created_at")

    @extend_schema(request=SaleCreateSerializer, responses={201: SaleSerializer})
    def create(self, request, *args, **kwargs):
        s = SaleCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            sale = record_sale(
                resolve_session(request),
                items=data["items"],
                sale_date=data.get("sale_date"),
                customer_name=data.get("customer_name", ""),
                on_credit=data.get("on_credit", False),
                status=data["status"],
                notes=data.get("notes", ""),
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(self.get_serializer(sale).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=SaleStatusSerializer, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"], url_path="status")
    def change_status(self, request, pk=None):
        sale = self.get_object()
        s = SaleStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            sale = change_sale_status(resolve_session(request), sale=sale, status=s.validated_data["status"])
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(self.get_serializer(sale).data, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: SaleSerializer})
    @action(detail=True, methods=["post"])
    def repost(self, request, pk=None):
        sale = self.get_object()
        if not sale.is_postable:
            return Response(
                {"detail": f"Sale {sale.sale_number} is {sale.status}; nothing to post."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        post_sale(resolve_session(request), sale=sale)
        sale.refresh_from_db()
        return Response(self.get_serializer(sale).data, status=status.HTTP_200_OK)
