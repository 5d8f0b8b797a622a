# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account


class AccountSerializer(serializers.ModelSerializer):
    """
    Read serializer for chart-of-accounts rows.
    UI needs: code, name, type, parent (and id for keys).
    """

    parent_code = serializers.CharField(source="parent.code", read_only=True, default=None)

    class Meta:
        model = Account
        fields = (
            "id",
            "code",
            "name",
            "account_type",
            "parent",
            "parent_code",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=20)
    name = serializers.CharField(max_length=255)
    account_type = serializers.CharField()
    parent = serializers.IntegerField(required=False, allow_null=True)
    is_active = serializers.BooleanField(required=False, default=True)


class AccountUpdateSerializer(serializers.Serializer):
    """
    Code and type are fixed once the account exists; only the label and
    the parent can move.
    """

    name = serializers.CharField(max_length=255, required=False)
    parent = serializers.IntegerField(required=False, allow_null=True)


class AccountBalanceSerializer(serializers.Serializer):
    account_id = serializers.IntegerField()
    code = serializers.CharField()
    name = serializers.CharField()
    account_type = serializers.CharField()
    as_of = serializers.DateField(allow_null=True)
    balance = serializers.DecimalField(max_digits=16, decimal_places=2, coerce_to_string=False)
