# accounting/api/serializers/expenses.py

from rest_framework import serializers

from accounting.expense_categories import CATEGORY_CHOICES, category_label
from accounting.models.expense import Expense, ExpenseCategoryAccount


class ExpenseSerializer(serializers.ModelSerializer):
    """
    Output serializer (DB truth) - clean, stable contract.
    """

    category_label = serializers.SerializerMethodField()
    journal_entry_number = serializers.CharField(
        source="journal_entry.entry_number", read_only=True, default=None
    )

    class Meta:
        model = Expense
        fields = [
            "id",
            "title",
            "description",
            "category",
            "category_label",
            "amount",
            "expense_date",
            "payment_source",
            "activity",
            "posting_status",
            "posting_error",
            "posted_at",
            "journal_entry",
            "journal_entry_number",
            "created_at",
        ]
        read_only_fields = fields

    def get_category_label(self, obj):
        return category_label(obj.category)


class ExpenseCreateSerializer(serializers.Serializer):
    """
    Input serializer (Swagger-visible).
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2)
    expense_date = serializers.DateField(required=False)
    payment_source = serializers.ChoiceField(
        choices=[Expense.PAYMENT_CASH, Expense.PAYMENT_BANK],
        default=Expense.PAYMENT_CASH,
    )

    def validate_amount(self, value):
        if value is None:
            raise serializers.ValidationError("amount is required")
        if value <= 0:
            raise serializers.ValidationError("amount must be > 0")
        return value

    def validate_title(self, value):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("title is required")
        return v


class ExpenseCategoryAccountSerializer(serializers.ModelSerializer):
    category_label = serializers.SerializerMethodField()
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)

    class Meta:
        model = ExpenseCategoryAccount
        fields = [
            "id",
            "category",
            "category_label",
            "account",
            "account_code",
            "account_name",
            "updated_at",
        ]
        read_only_fields = fields

    def get_category_label(self, obj):
        return category_label(obj.category)


class ExpenseCategoryAccountInputSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=CATEGORY_CHOICES)
    account = serializers.IntegerField()
