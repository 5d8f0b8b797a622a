# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

# Canonical ViewSets live in accounting/api/view.py (singular) in this project.
# We import directly to avoid circular imports through views/__init__.py.
from accounting.api.view import AccountViewSet, JournalEntryViewSet
from accounting.api.views.balance_sheet import BalanceSheetView
from accounting.api.views.expenses import ExpenseCategoryMappingView, ExpenseListCreateView
from accounting.api.views.overview import AccountingOverviewView, PostingSetupView
from accounting.api.views.profit_and_loss import ProfitAndLossView
from accounting.api.views.trial_balance import TrialBalanceView

router = DefaultRouter()
router.register("accounts", AccountViewSet, basename="account")
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")

urlpatterns = [
    # Router endpoints
    path("", include(router.urls)),
    # Reports
    path("trial-balance/", TrialBalanceView.as_view(), name="trial-balance"),
    path("balance-sheet/", BalanceSheetView.as_view(), name="balance-sheet"),
    path("profit-and-loss/", ProfitAndLossView.as_view(), name="profit-and-loss"),
    path("overview/", AccountingOverviewView.as_view(), name="accounting-overview"),
    path("posting-setup/", PostingSetupView.as_view(), name="posting-setup"),
    # Business events + configuration
    path("expenses/", ExpenseListCreateView.as_view(), name="expenses"),
    path(
        "expense-categories/",
        ExpenseCategoryMappingView.as_view(),
        name="expense-categories",
    ),
]
