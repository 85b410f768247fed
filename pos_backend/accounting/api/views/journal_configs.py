# accounting/api/views/journal_configs.py

"""
PATH: accounting/api/views/journal_configs.py

JOURNAL CONFIG API (POSTING RULES)

GET    /api/journal-config/              -> active rules of the store
POST   /api/journal-config/              -> replace rules of (transactionType, detailKey)
GET    /api/journal-config/discovery/    -> used detail keys + mapping status
DELETE /api/journal-config/<uuid>/       -> soft delete
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.responses import ledger_error_response
from accounting.api.serializers.journal_configs import (
    DiscoveryRowSerializer,
    JournalConfigReplaceSerializer,
    JournalConfigSerializer,
)
from accounting.services.exceptions import AccountingServiceError
from accounting.services.journal_config_service import (
    get_discovery,
    list_configs,
    remove_config,
    replace_configs,
)
from store.context import get_request_user_id, require_store_uuid


class JournalConfigListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalConfigReplaceSerializer

    @extend_schema(
        tags=["journal-config"],
        parameters=[OpenApiParameter("transactionType", str, required=False)],
        responses=JournalConfigSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)
        transaction_type = (request.query_params.get("transactionType") or "").strip() or None

        qs = list_configs(store_uuid=store_uuid, transaction_type=transaction_type)
        return Response(JournalConfigSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["journal-config"],
        request=JournalConfigReplaceSerializer,
        responses={201: JournalConfigSerializer(many=True), 400: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            configs = replace_configs(
                store_uuid=store_uuid,
                transaction_type=data["transaction_type"],
                detail_key=data["detail_key"],
                items=[dict(item) for item in data["items"]],
                user_id=get_request_user_id(request),
                match_mode=data.get("match_mode") or None,
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(
            JournalConfigSerializer(configs, many=True).data,
            status=status.HTTP_201_CREATED,
        )


class JournalConfigDiscoveryView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = DiscoveryRowSerializer

    @extend_schema(
        tags=["journal-config"],
        parameters=[OpenApiParameter("prefix", str, required=False)],
        responses=DiscoveryRowSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            rows = get_discovery(
                store_uuid=store_uuid,
                prefix=request.query_params.get("prefix"),
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(DiscoveryRowSerializer(rows, many=True).data, status=status.HTTP_200_OK)


class JournalConfigDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalConfigSerializer

    @extend_schema(tags=["journal-config"], responses={204: None, 404: dict})
    def delete(self, request, uuid, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            remove_config(
                store_uuid=store_uuid,
                uuid=uuid,
                user_id=get_request_user_id(request),
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)
