# sales/serializers/sale.py

from rest_framework import serializers

from sales.models import Sale
from sales.serializers.sale_item import SaleItemInputSerializer, SaleItemSerializer


class SaleSerializer(serializers.ModelSerializer):
    """
    Read model: the sale, its items and its accounting linkage.
    """

    items = SaleItemSerializer(many=True, read_only=True)
    journal_entry_number = serializers.CharField(
        source="journal_entry.entry_number", read_only=True, default=None
    )
    cogs_journal_entry_number = serializers.CharField(
        source="cogs_journal_entry.entry_number", read_only=True, default=None
    )

    class Meta:
        model = Sale
        fields = [
            "id",
            "sale_number",
            "sale_date",
            "customer_name",
            "status",
            "on_credit",
            "total_amount",
            "notes",
            "activity",
            "items",
            "posting_status",
            "posting_error",
            "posted_at",
            "journal_entry",
            "journal_entry_number",
            "cogs_journal_entry",
            "cogs_journal_entry_number",
            "created_at",
        ]
        read_only_fields = fields


class SaleCreateSerializer(serializers.Serializer):
    sale_date = serializers.DateField(required=False)
    customer_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    on_credit = serializers.BooleanField(required=False, default=False)
    status = serializers.ChoiceField(
        choices=[Sale.STATUS_IN_PROGRESS, Sale.STATUS_DELIVERED, Sale.STATUS_PAID],
        default=Sale.STATUS_IN_PROGRESS,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = SaleItemInputSerializer(many=True)


class SaleStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Sale.STATUS_CHOICES)
