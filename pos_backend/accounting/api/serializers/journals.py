# accounting/api/serializers/journals.py

from rest_framework import serializers

from accounting.models.journal import Journal, JournalDetail


class JournalDetailSerializer(serializers.ModelSerializer):
    journalCode = serializers.CharField(source="journal_id", read_only=True)
    createdBy = serializers.CharField(source="created_by", read_only=True)

    class Meta:
        model = JournalDetail
        fields = ("uuid", "journalCode", "key", "value", "position", "createdBy")
        read_only_fields = fields


class JournalSerializer(serializers.ModelSerializer):
    transactionType = serializers.CharField(source="transaction_type", read_only=True)
    createdBy = serializers.CharField(source="created_by", read_only=True)
    verifiedBy = serializers.CharField(source="verified_by", read_only=True, allow_null=True)
    verifiedAt = serializers.DateTimeField(source="verified_at", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    details = JournalDetailSerializer(many=True, read_only=True)

    class Meta:
        model = Journal
        fields = (
            "uuid",
            "code",
            "transactionType",
            "createdBy",
            "verifiedBy",
            "verifiedAt",
            "createdAt",
            "details",
        )
        read_only_fields = fields


class JournalCreateSerializer(serializers.Serializer):
    """
    {"details": {"grand_total": 50000, "items": [{"stok_product_uuid": "P1"}]}}
    """

    details = serializers.DictField(required=False, allow_null=True, default=dict)


class JournalPostingSerializer(serializers.Serializer):
    message = serializers.CharField()
    journal = JournalSerializer(allow_null=True)


class StockAdjustmentItemSerializer(serializers.Serializer):
    productUuid = serializers.CharField(source="product_uuid")
    unitUuid = serializers.CharField(source="unit_uuid", required=False, allow_blank=True, default="")
    oldQty = serializers.DecimalField(source="old_qty", max_digits=20, decimal_places=6)
    newQty = serializers.DecimalField(source="new_qty", max_digits=20, decimal_places=6)


class StockAdjustmentSerializer(serializers.Serializer):
    adjustments = StockAdjustmentItemSerializer(many=True, allow_empty=True)
