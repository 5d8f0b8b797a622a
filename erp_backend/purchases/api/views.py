# purchases/api/views.py

"""
PURCHASES API

GET  /api/purchases/                     ?status=&posting_status=
POST /api/purchases/
GET  /api/purchases/<id>/
POST /api/purchases/<id>/status/
POST /api/purchases/<id>/repost/

All routes require purchases.record and are scoped to the session
company. Posting to the ledger is best-effort: a failed posting still
returns the purchase, with posting_status=FAILED.
"""

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import HANDLED_ERRORS, error_response
from companies.permissions import CAP_PURCHASES_RECORD, HasCapability
from companies.session import resolve_session
from purchases.api.serializers import (
    PurchaseCreateSerializer,
    PurchaseSerializer,
    PurchaseStatusSerializer,
)
from purchases.models import Purchase
from purchases.services.purchase_service import (
    change_purchase_status,
    post_purchase,
    record_purchase,
)


def _company_purchases(request):
    session = resolve_session(request)
    return (
        Purchase.objects.filter(company=session.company)
        .select_related("journal_entry")
        .prefetch_related("items")
    )


class PurchaseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASES_RECORD
    serializer_class = PurchaseCreateSerializer

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer(many=True))
    def get(self, request):
        qs = _company_purchases(request).order_by("-purchase_date", "-created_at")

        if request.query_params.get("status"):
            qs = qs.filter(status=request.query_params["status"])
        if request.query_params.get("posting_status"):
            qs = qs.filter(posting_status=request.query_params["posting_status"].upper())

        return Response(PurchaseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["purchases"],
        request=PurchaseCreateSerializer,
        responses={201: PurchaseSerializer},
    )
    def post(self, request):
        s = PurchaseCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            purchase = record_purchase(
                resolve_session(request),
                items=data["items"],
                purchase_date=data.get("purchase_date"),
                supplier_name=data.get("supplier_name", ""),
                on_credit=data.get("on_credit", False),
                status=data["status"],
                notes=data.get("notes", ""),
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_201_CREATED)


class PurchaseDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASES_RECORD

    @extend_schema(tags=["purchases"], responses=PurchaseSerializer)
    def get(self, request, purchase_id):
        purchase = get_object_or_404(_company_purchases(request), pk=purchase_id)
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)


class PurchaseStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASES_RECORD
    serializer_class = PurchaseStatusSerializer

    @extend_schema(
        tags=["purchases"],
        request=PurchaseStatusSerializer,
        responses={200: PurchaseSerializer},
    )
    def post(self, request, purchase_id):
        purchase = get_object_or_404(_company_purchases(request), pk=purchase_id)
        s = PurchaseStatusSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            purchase = change_purchase_status(
                resolve_session(request),
                purchase=purchase,
                status=s.validated_data["status"],
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)


class PurchaseRepostView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASES_RECORD

    @extend_schema(tags=["purchases"], request=None, responses={200: PurchaseSerializer})
    def post(self, request, purchase_id):
        purchase = get_object_or_404(_company_purchases(request), pk=purchase_id)
        if not purchase.is_postable:
            return Response(
                {"detail": f"Purchase {purchase.purchase_number} is {purchase.status}; nothing to post."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        post_purchase(resolve_session(request), purchase=purchase)
        purchase.refresh_from_db()
        return Response(PurchaseSerializer(purchase).data, status=status.HTTP_200_OK)
