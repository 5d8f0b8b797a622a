# purchases/api/serializers.py

from rest_framework import serializers

from purchases.models import Purchase, PurchaseItem


class PurchaseItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = PurchaseItem
        fields = [
            "id",
            "product_name",
            "product_code",
            "quantity",
            "received_quantity",
            "unit_price",
            "total_price",
        ]
        read_only_fields = fields


class PurchaseItemCreateSerializer(serializers.Serializer):
    product_name = serializers.CharField(max_length=200, allow_blank=True)
    product_code = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=0)
    received_quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)


class PurchaseCreateSerializer(serializers.Serializer):
    purchase_date = serializers.DateField(required=False)
    supplier_name = serializers.CharField(max_length=200, required=False, allow_blank=True, default="")
    on_credit = serializers.BooleanField(required=False, default=False)
    status = serializers.ChoiceField(
        choices=[Purchase.STATUS_PENDING, Purchase.STATUS_RECEIVED, Purchase.STATUS_PAID],
        default=Purchase.STATUS_PENDING,
    )
    notes = serializers.CharField(required=False, allow_blank=True, default="")
    items = PurchaseItemCreateSerializer(many=True)


class PurchaseSerializer(serializers.ModelSerializer):
    items = PurchaseItemSerializer(many=True, read_only=True)
    journal_entry_number = serializers.CharField(
        source="journal_entry.entry_number", read_only=True, default=None
    )

    class Meta:
        model = Purchase
        fields = [
            "id",
            "purchase_number",
            "purchase_date",
            "supplier_name",
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
            "created_at",
        ]
        read_only_fields = fields


class PurchaseStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Purchase.STATUSES)
