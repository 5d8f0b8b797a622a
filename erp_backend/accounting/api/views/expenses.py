# PATH: accounting/api/views/expenses.py

"""
PATH: accounting/api/views/expenses.py

EXPENSES API

GET  /api/accounting/expenses/
    - Requires expenses.record
    - Scoped to the session company

POST /api/accounting/expenses/
    - Requires expenses.record
    - Creates the expense, then posts to the ledger best-effort.
      A posting failure still returns 201; the body carries
      posting_status=FAILED and posting_error.

GET  /api/accounting/expense-categories/
PUT  /api/accounting/expense-categories/
    - Category -> expense account map (validated when configured)
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.errors import HANDLED_ERRORS, error_response
from accounting.api.serializers.expenses import (
    ExpenseCategoryAccountInputSerializer,
    ExpenseCategoryAccountSerializer,
    ExpenseCreateSerializer,
    ExpenseSerializer,
)
from accounting.expense_categories import EXPENSE_CATEGORIES
from accounting.models.expense import Expense, ExpenseCategoryAccount
from accounting.services.account_resolver import configure_expense_category
from accounting.services.expense_service import record_expense
from companies.permissions import (
    CAP_ACCOUNTING_CHART,
    CAP_ACCOUNTING_VIEW,
    CAP_EXPENSES_RECORD,
    HasCapability,
)
from companies.session import resolve_session


class ExpenseListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "GET": CAP_EXPENSES_RECORD,
        "POST": CAP_EXPENSES_RECORD,
    }
    serializer_class = ExpenseCreateSerializer

    @extend_schema(
        tags=["accounting"],
        responses=ExpenseSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        session = resolve_session(request)
        qs = (
            Expense.objects.filter(company=session.company)
            .select_related("journal_entry")
            .order_by("-expense_date", "-created_at")
        )

        posting_status = request.query_params.get("posting_status")
        if posting_status:
            qs = qs.filter(posting_status=posting_status.upper())

        return Response(ExpenseSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=ExpenseCreateSerializer,
        responses={201: ExpenseSerializer, 400: dict, 403: dict},
    )
    def post(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            expense = record_expense(
                resolve_session(request),
                title=data["title"],
                description=data.get("description", ""),
                category=data["category"],
                amount=data["amount"],
                expense_date=data.get("expense_date"),
                payment_source=data["payment_source"],
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class ExpenseCategoryMappingView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {
        "GET": CAP_ACCOUNTING_VIEW,
        "PUT": CAP_ACCOUNTING_CHART,
    }
    serializer_class = ExpenseCategoryAccountInputSerializer

    @extend_schema(tags=["accounting"], responses={200: dict})
    def get(self, request, *args, **kwargs):
        session = resolve_session(request)
        mapped = {
            m.category: m
            for m in ExpenseCategoryAccount.objects.filter(company=session.company).select_related("account")
        }

        rows = []
        for code, label, group in EXPENSE_CATEGORIES:
            mapping = mapped.get(code)
            rows.append(
                {
                    "category": code,
                    "category_label": label,
                    "group": group,
                    "mapping": ExpenseCategoryAccountSerializer(mapping).data if mapping else None,
                }
            )
        return Response(rows, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["accounting"],
        request=ExpenseCategoryAccountInputSerializer,
        responses={200: ExpenseCategoryAccountSerializer},
    )
    def put(self, request, *args, **kwargs):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            mapping = configure_expense_category(
                resolve_session(request),
                category=s.validated_data["category"],
                account=s.validated_data["account"],
            )
        except HANDLED_ERRORS as exc:
            return error_response(exc)

        return Response(ExpenseCategoryAccountSerializer(mapping).data, status=status.HTTP_200_OK)
