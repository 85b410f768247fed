# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account


class AccountSerializer(serializers.ModelSerializer):
    """
    Wire shape of an account (camelCase, as the frontend expects).
    """

    normalBalance = serializers.CharField(source="normal_balance", read_only=True)
    isSystem = serializers.BooleanField(source="is_system", read_only=True)
    parentUuid = serializers.CharField(source="parent_id", read_only=True, allow_null=True)
    storeUuid = serializers.CharField(source="store_id", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Account
        fields = (
            "uuid",
            "code",
            "name",
            "category",
            "normalBalance",
            "isSystem",
            "parentUuid",
            "storeUuid",
            "createdAt",
            "updatedAt",
        )
        read_only_fields = fields


class AccountCreateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=20)
    name = serializers.CharField(max_length=100)
    category = serializers.ChoiceField(choices=Account.CATEGORY_CHOICES)
    normalBalance = serializers.ChoiceField(
        source="normal_balance",
        choices=Account.NORMAL_BALANCE_CHOICES,
        required=False,
        allow_blank=True,
    )
    parentUuid = serializers.CharField(
        source="parent_uuid",
        required=False,
        allow_null=True,
        allow_blank=True,
    )


class AccountUpdateSerializer(AccountCreateSerializer):
    """
    PATCH body; every field optional. parentUuid=null detaches the account.
    """

    code = serializers.CharField(max_length=20, required=False)
    name = serializers.CharField(max_length=100, required=False)
    category = serializers.ChoiceField(choices=Account.CATEGORY_CHOICES, required=False)


class AccountCategorySerializer(serializers.Serializer):
    value = serializers.CharField()
    label = serializers.CharField()
    normalBalance = serializers.CharField(source="normal_balance")
