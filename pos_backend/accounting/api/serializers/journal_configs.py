# accounting/api/serializers/journal_configs.py

from rest_framework import serializers

from accounting.models.journal_config import JournalConfig


class JournalConfigSerializer(serializers.ModelSerializer):
    transactionType = serializers.CharField(source="transaction_type", read_only=True)
    detailKey = serializers.CharField(source="detail_key", read_only=True)
    matchMode = serializers.CharField(source="match_mode", read_only=True)
    accountUuid = serializers.CharField(source="account_id", read_only=True)
    accountCode = serializers.CharField(source="account.code", read_only=True)
    accountName = serializers.CharField(source="account.name", read_only=True)
    createdBy = serializers.CharField(source="created_by", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = JournalConfig
        fields = (
            "uuid",
            "transactionType",
            "detailKey",
            "matchMode",
            "position",
            "accountUuid",
            "accountCode",
            "accountName",
            "createdBy",
            "createdAt",
        )
        read_only_fields = fields


class JournalConfigItemSerializer(serializers.Serializer):
    position = serializers.ChoiceField(choices=JournalConfig.POSITION_CHOICES)
    accountUuid = serializers.CharField(source="account_uuid")


class JournalConfigReplaceSerializer(serializers.Serializer):
    """
    Replaces every rule of (transactionType, detailKey).
    matchMode omitted -> PREFIX when detailKey ends with "_", else EXACT.
    """

    transactionType = serializers.CharField(source="transaction_type", max_length=50)
    detailKey = serializers.CharField(source="detail_key", max_length=100)
    matchMode = serializers.ChoiceField(
        source="match_mode",
        choices=JournalConfig.MATCH_MODE_CHOICES,
        required=False,
        allow_blank=True,
    )
    items = JournalConfigItemSerializer(many=True, allow_empty=True)


class DiscoveryConfigSerializer(serializers.Serializer):
    uuid = serializers.CharField()
    accountUuid = serializers.CharField(source="account_uuid")
    accountCode = serializers.CharField(source="account_code")
    accountName = serializers.CharField(source="account_name")
    position = serializers.CharField()
    detailKeySource = serializers.CharField(source="detail_key_source")


class DiscoveryRowSerializer(serializers.Serializer):
    transactionType = serializers.CharField(source="transaction_type")
    detailKey = serializers.CharField(source="detail_key")
    frequency = serializers.IntegerField()
    totalValue = serializers.FloatField(source="total_value")
    isMapped = serializers.BooleanField(source="is_mapped")
    isWildcard = serializers.BooleanField(source="is_wildcard")
    configs = DiscoveryConfigSerializer(many=True)
