# PATH: accounting/api/view.py

"""
PATH: accounting/api/view.py

ACCOUNTING API VIEWSETS

Accounts (chart of accounts):
    GET    /api/accounting/accounts/                 ?account_type=&active_only=&search=
    POST   /api/accounting/accounts/
    GET    /api/accounting/accounts/<id>/
    PATCH  /api/accounting/accounts/<id>/             (name, parent)
    DELETE /api/accounting/accounts/<id>/             (deletes if unreferenced, else deactivates)
    POST   /api/accounting/accounts/<id>/deactivate/
    POST   /api/accounting/accounts/<id>/reactivate/
    GET    /api/accounting/accounts/<id>/balance/     ?as_of=&activity=

Journal entries (immutable):
    GET    /api/accounting/journal-entries/           ?search=&date_from=&date_to=&month=&reference=&activity=&account=
    GET    /api/accounting/journal-entries/<id>/      (with lines)
    POST   /api/accounting/journal-entries/           (manual entry)
    POST   /api/accounting/journal-entries/<id>/reverse/

Security rules:
- Every route needs an authenticated user with a tenant session
- Reads need accounting.view; chart writes need accounting.chart;
  postings need accounting.post
- Querysets are always scoped to the session company
"""

from django_filters.rest_framework import DjangoFilterBackend
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from accounting.api.errors import HANDLED_ERRORS, error_response
from accounting.api.filters import AccountFilterSet, JournalEntryFilterSet
from accounting.api.serializers import (
    AccountBalanceSerializer,
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    JournalEntryDetailSerializer,
    JournalEntrySerializer,
    ManualEntryCreateSerializer,
    ReverseEntrySerializer,
)
from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.services import chart_service
from accounting.services.balance_service import compute_balance, parse_date
from accounting.services.posting import post_manual_entry
from accounting.services.reversal_service import reverse_entry
from companies.models import Activity
from companies.permissions import (
    CAP_ACCOUNTING_CHART,
    CAP_ACCOUNTING_POST,
    CAP_ACCOUNTING_VIEW,
    HasCapability,
)
from companies.session import resolve_session


class JournalEntryPagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = "page_size"
    max_page_size = 500


@extend_schema(tags=["accounting"])
class AccountViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "GET": CAP_ACCOUNTING_VIEW,
        "POST": CAP_ACCOUNTING_CHART,
        "PATCH": CAP_ACCOUNTING_CHART,
        "PUT": CAP_ACCOUNTING_CHART,
        "DELETE": CAP_ACCOUNTING_CHART,
    }
    serializer_class = AccountSerializer
    filter_backends = [DjangoFilterBackend]
    filterset_class = AccountFilterSet

    def get_queryset(self):
        session = resolve_session(self.request)
        return Account.objects.filter(company=session.company).select_related("parent").order_by("code")

    def list(self, request, *args, **kwargs):
        try:
            return super().list(request, *args, **kwargs)
        except HANDLED_ERRORS as exc:
            return error_response(exc)

    @extend_schema(request=AccountCreateSerializer, responses={201: AccountSerializer})
    def create(self, request, *args, **kwargs):
        s = AccountCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            account = chart_service.create_account(resolve_session(request), **s.validated_data)
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=AccountUpdateSerializer, responses={200: AccountSerializer})
    def partial_update(self, request, *args, **kwargs):
        account = self.get_object()
        s = AccountUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            account = chart_service.update_account(
                resolve_session(request), account=account, **s.validated_data
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(request=AccountUpdateSerializer, responses={200: AccountSerializer})
    def update(self, request, *args, **kwargs):
        return self.partial_update(request, *args, **kwargs)

    @extend_schema(responses={200: dict})
    def destroy(self, request, *args, **kwargs):
        account = self.get_object()
        try:
            outcome = chart_service.delete_account(resolve_session(request), account=account)
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        if outcome == chart_service.DELETED:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(
            {
                "detail": "Account is referenced by journal lines or other records; it was deactivated instead.",
                "outcome": outcome,
                "account": AccountSerializer(account).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(request=None, responses={200: AccountSerializer})
    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        account = chart_service.deactivate_account(resolve_session(request), account=self.get_object())
        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: AccountSerializer})
    @action(detail=True, methods=["post"])
    def reactivate(self, request, pk=None):
        account = chart_service.reactivate_account(resolve_session(request), account=self.get_object())
        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(
        parameters=[
            OpenApiParameter(name="as_of", type=str, required=False, description="YYYY-MM-DD (inclusive)"),
            OpenApiParameter(name="activity", type=int, required=False, description="Restrict to one activity"),
        ],
        responses={200: AccountBalanceSerializer},
    )
    @action(detail=True, methods=["get"])
    def balance(self, request, pk=None):
        account = self.get_object()
        session = resolve_session(request)

        activity = None
        activity_id = request.query_params.get("activity")
        if activity_id:
            activity = Activity.objects.filter(company=session.company, pk=activity_id).first()
            if activity is None:
                return Response({"detail": "Unknown activity"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            as_of = parse_date(request.query_params.get("as_of"), field="as_of")
            balance = compute_balance(account, as_of=as_of, activity=activity)
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        payload = {
            "account_id": account.id,
            "code": account.code,
            "name": account.name,
            "account_type": account.account_type,
            "as_of": as_of,
            "balance": balance,
        }
        return Response(AccountBalanceSerializer(payload).data, status=status.HTTP_200_OK)


@extend_schema(tags=["accounting"])
class JournalEntryViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    """
    Journal entries are append-only: no update, no delete. Mistakes are
    corrected with the reverse action (or a new manual entry).
    """

    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "GET": CAP_ACCOUNTING_VIEW,
        "POST": CAP_ACCOUNTING_POST,
    }
    http_method_names = ["get", "post", "head", "options"]
    filter_backends = [DjangoFilterBackend]
    filterset_class = JournalEntryFilterSet
    pagination_class = JournalEntryPagination

    def get_queryset(self):
        session = resolve_session(self.request)
        return (
            JournalEntry.objects.filter(company=session.company)
            .select_related("activity", "created_by", "reverses")
            .order_by("-entry_date", "-created_at", "-id")
        )

    def get_serializer_class(self):
        if self.action == "retrieve":
            return JournalEntryDetailSerializer
        return JournalEntrySerializer

    def list(self, request, *args, **kwargs):
        try:
            return super().list(request, *args, **kwargs)
        except HANDLED_ERRORS as exc:
            return error_response(exc)

    def retrieve(self, request, *args, **kwargs):
        entry = self.get_object()
        entry = (
            JournalEntry.objects.prefetch_related("lines__account")
            .select_related("activity", "created_by", "reverses")
            .get(pk=entry.pk)
        )
        return Response(JournalEntryDetailSerializer(entry).data, status=status.HTTP_200_OK)

    @extend_schema(request=ManualEntryCreateSerializer, responses={201: JournalEntryDetailSerializer})
    def create(self, request, *args, **kwargs):
        s = ManualEntryCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            entry = post_manual_entry(
                resolve_session(request),
                rows=data["lines"],
                description=data["description"],
                entry_date=data.get("entry_date"),
                reference=data.get("reference", ""),
                idempotency_key=data.get("idempotency_key"),
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(JournalEntryDetailSerializer(entry).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=ReverseEntrySerializer, responses={201: JournalEntryDetailSerializer})
    @action(detail=True, methods=["post"])
    def reverse(self, request, pk=None):
        entry = self.get_object()
        s = ReverseEntrySerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            reversal = reverse_entry(
                resolve_session(request),
                entry=entry,
                entry_date=s.validated_data.get("entry_date"),
                description=s.validated_data.get("description"),
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(JournalEntryDetailSerializer(reversal).data, status=status.HTTP_201_CREATED)
