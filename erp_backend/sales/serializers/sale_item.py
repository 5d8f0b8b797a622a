from rest_framework import serializers

from sales.models import SaleItem


class SaleItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = SaleItem
        fields = [
            "id",
            "product_name",
            "product_code",
            "quantity",
            "unit_price",
            "unit_cost",
            "total_price",
        ]
        read_only_fields = fields


class SaleItemInputSerializer(serializers.Serializer):
    product_name = serializers.CharField(max_length=200, allow_blank=True)
    product_code = serializers.CharField(max_length=50, required=False, allow_blank=True, default="")
    quantity = serializers.IntegerField(min_value=0)
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, default=0
    )
