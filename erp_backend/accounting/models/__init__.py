# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.business_event import PostedBusinessEvent, PostingStatus
from accounting.models.expense import Expense, ExpenseCategoryAccount
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalEntryLine
from accounting.models.sequence import EntryNumberSequence

__all__ = [
    "Account",
    "JournalEntry",
    "JournalEntryLine",
    "EntryNumberSequence",
    "Expense",
    "ExpenseCategoryAccount",
    "PostedBusinessEvent",
    "PostingStatus",
]
