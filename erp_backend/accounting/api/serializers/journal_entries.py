# accounting/api/serializers/journal_entries.py

from rest_framework import serializers

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalEntryLine


class JournalEntryLineSerializer(serializers.ModelSerializer):
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)

    class Meta:
        model = JournalEntryLine
        fields = (
            "id",
            "line_number",
            "account",
            "account_code",
            "account_name",
            "description",
            "debit_amount",
            "credit_amount",
        )
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    """
    Journal header (list view). Immutable, so read-only throughout.
    """

    reverses_number = serializers.CharField(source="reverses.entry_number", read_only=True, default=None)
    created_by_username = serializers.CharField(source="created_by.username", read_only=True, default=None)

    class Meta:
        model = JournalEntry
        fields = (
            "id",
            "entry_number",
            "numbering_fallback",
            "entry_date",
            "description",
            "reference",
            "activity",
            "total_debit",
            "total_credit",
            "reverses",
            "reverses_number",
            "idempotency_key",
            "created_by",
            "created_by_username",
            "created_at",
        )
        read_only_fields = fields


class JournalEntryDetailSerializer(JournalEntrySerializer):
    lines = JournalEntryLineSerializer(many=True, read_only=True)
    reversed_by = serializers.SerializerMethodField()

    class Meta(JournalEntrySerializer.Meta):
        fields = JournalEntrySerializer.Meta.fields + ("lines", "reversed_by")
        read_only_fields = fields

    def get_reversed_by(self, obj):
        reversal = JournalEntry.objects.filter(reverses=obj).only("id").first()
        return reversal.id if reversal else None


class ManualLineInputSerializer(serializers.Serializer):
    """
    One row of the manual entry form. Amounts stay raw here; the engine
    reports which line breaks which rule.
    """

    account_id = serializers.IntegerField(required=False, allow_null=True)
    debit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    credit = serializers.DecimalField(max_digits=14, decimal_places=2, required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ManualEntryCreateSerializer(serializers.Serializer):
    entry_date = serializers.DateField(required=False)
    description = serializers.CharField()
    reference = serializers.CharField(required=False, allow_blank=True, default="")
    idempotency_key = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=120)
    lines = ManualLineInputSerializer(many=True)


class ReverseEntrySerializer(serializers.Serializer):
    entry_date = serializers.DateField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
