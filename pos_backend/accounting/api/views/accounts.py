# accounting/api/views/accounts.py

"""
PATH: accounting/api/views/accounts.py

ACCOUNTS API (STORE CHART OF ACCOUNTS)

GET    /api/account/                     -> list (filters: category, isSystem, parentUuid, q)
POST   /api/account/                     -> create
GET    /api/account/categories/          -> categories + normal balance
GET    /api/account/<uuid>/              -> detail
PATCH  /api/account/<uuid>/              -> partial update (category cascades to children)
DELETE /api/account/<uuid>/              -> delete (never system accounts)
GET    /api/account/report/financial/    -> balances per account
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.filters import AccountFilter
from accounting.api.responses import ledger_error_response
from accounting.api.serializers.accounts import (
    AccountCategorySerializer,
    AccountCreateSerializer,
    AccountSerializer,
    AccountUpdateSerializer,
)
from accounting.api.serializers.reports import (
    DateRangeQuerySerializer,
    FinancialReportRowSerializer,
)
from accounting.models.account import Account
from accounting.services.account_service import (
    create_account,
    delete_account,
    get_account,
    get_account_categories,
    list_accounts,
    update_account,
)
from accounting.services.exceptions import AccountingServiceError
from accounting.services.report_service import default_report_range, get_financial_report
from store.context import require_store_uuid


class AccountListCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountCreateSerializer
    filterset_class = AccountFilter
    queryset = Account.objects.none()

    @extend_schema(tags=["account"], responses=AccountSerializer(many=True))
    def get(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            qs = list_accounts(store_uuid=store_uuid)
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        qs = self.filter_queryset(qs)
        return Response(AccountSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["account"],
        request=AccountCreateSerializer,
        responses={201: AccountSerializer, 400: dict, 404: dict},
    )
    def post(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            account = create_account(
                store_uuid=store_uuid,
                code=data["code"],
                name=data["name"],
                category=data["category"],
                normal_balance=data.get("normal_balance") or None,
                parent_uuid=data.get("parent_uuid") or None,
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_201_CREATED)


class AccountCategoriesView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountCategorySerializer

    @extend_schema(tags=["account"], responses=AccountCategorySerializer(many=True))
    def get(self, request, *args, **kwargs):
        return Response(
            AccountCategorySerializer(get_account_categories(), many=True).data,
            status=status.HTTP_200_OK,
        )


class AccountDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountUpdateSerializer

    @extend_schema(tags=["account"], responses={200: AccountSerializer, 404: dict})
    def get(self, request, uuid, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            account = get_account(store_uuid=store_uuid, uuid=uuid)
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["account"],
        request=AccountUpdateSerializer,
        responses={200: AccountSerializer, 400: dict, 404: dict},
    )
    def patch(self, request, uuid, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        patch = dict(s.validated_data)
        if "normal_balance" in patch and not patch["normal_balance"]:
            patch.pop("normal_balance")
        if "parent_uuid" in patch and not patch["parent_uuid"]:
            patch["parent_uuid"] = None

        try:
            account = update_account(store_uuid=store_uuid, uuid=uuid, patch=patch)
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(AccountSerializer(account).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["account"], responses={204: None, 400: dict, 404: dict})
    def delete(self, request, uuid, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            delete_account(store_uuid=store_uuid, uuid=uuid)
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(status=status.HTTP_204_NO_CONTENT)


class FinancialReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = FinancialReportRowSerializer

    @extend_schema(
        tags=["account"],
        parameters=[
            OpenApiParameter("startDate", str, description="YYYY-MM-DD (default: first day of month)"),
            OpenApiParameter("endDate", str, description="YYYY-MM-DD (default: today)"),
        ],
        responses=FinancialReportRowSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        q = DateRangeQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        default_start, default_end = default_report_range()
        start_date = q.validated_data.get("start_date") or default_start
        end_date = q.validated_data.get("end_date") or default_end

        try:
            rows = get_financial_report(
                store_uuid=store_uuid,
                start_date=start_date,
                end_date=end_date,
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(FinancialReportRowSerializer(rows, many=True).data, status=status.HTTP_200_OK)
