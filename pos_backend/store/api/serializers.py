# store/api/serializers.py

from rest_framework import serializers

from store.models import Store


class StoreSerializer(serializers.ModelSerializer):
    class Meta:
        model = Store
        fields = (
            "uuid",
            "name",
            "code",
            "address",
            "phone",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class InstallStoreSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    code = serializers.CharField(
        max_length=50, required=False, allow_blank=True, allow_null=True
    )
    address = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(
        max_length=50, required=False, allow_blank=True, default=""
    )
