# accounting/api/serializers/__init__.py

from accounting.api.serializers.accounts import (
    AccountBalanceSerializer,
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
)
from accounting.api.serializers.expenses import (
    ExpenseCategoryAccountInputSerializer,
    ExpenseCategoryAccountSerializer,
    ExpenseCreateSerializer,
    ExpenseSerializer,
)
from accounting.api.serializers.journal_entries import (
    JournalEntryDetailSerializer,
    JournalEntryLineSerializer,
    JournalEntrySerializer,
    ManualEntryCreateSerializer,
    ReverseEntrySerializer,
)

__all__ = [
    "AccountSerializer",
    "AccountCreateSerializer",
    "AccountUpdateSerializer",
    "AccountBalanceSerializer",
    "JournalEntrySerializer",
    "JournalEntryDetailSerializer",
    "JournalEntryLineSerializer",
    "ManualEntryCreateSerializer",
    "ReverseEntrySerializer",
    "ExpenseSerializer",
    "ExpenseCreateSerializer",
    "ExpenseCategoryAccountSerializer",
    "ExpenseCategoryAccountInputSerializer",
]
