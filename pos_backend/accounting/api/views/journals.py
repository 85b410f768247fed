# accounting/api/views/journals.py

"""
PATH: accounting/api/views/journals.py

JOURNAL API

POST /api/journal/sale/                 -> SALE journal
POST /api/journal/buy/                  -> BUY journal
POST /api/journal/return/sale|buy/      -> RETURN_SALE / RETURN_BUY
POST /api/journal/debt/ar|ap/           -> AR / AP
POST /api/journal/payment/ar|ap/        -> PAY_AR / PAY_AP
POST /api/journal/stock-adjustment/     -> STOCK_ADJUSTMENT (net qty changes)
GET  /api/journal/report/[<type>/]      -> store journals, newest first
POST /api/journal/<code>/verify/        -> idempotent verification
GET  /api/journal/chart/                -> daily SALE vs BUY totals

Every call is scoped by the X-Store-Id header.
"""

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.responses import ledger_error_response
from accounting.api.serializers.journals import (
    JournalCreateSerializer,
    JournalPostingSerializer,
    JournalSerializer,
    StockAdjustmentSerializer,
)
from accounting.api.serializers.reports import ChartPointSerializer, DateRangeQuerySerializer
from accounting.services.exceptions import AccountingServiceError
from accounting.services.journal_service import (
    create_journal,
    find_all_by_type,
    process_stock_adjustment,
    verify_journal,
)
from accounting.services.report_service import default_chart_range, get_chart_data
from store.context import get_request_user_id, require_store_uuid


def _posting_payload(result, *, message=None):
    if result is None:
        return {"message": message or "Nothing to journal", "journal": None}
    return {
        "message": result.message,
        "journal": JournalSerializer(result.journal).data,
    }


class JournalCreateView(GenericAPIView):
    """
    One class, one URL per transaction type:
    JournalCreateView.as_view(transaction_type="SALE")
    """

    permission_classes = [IsAuthenticated]
    serializer_class = JournalCreateSerializer
    transaction_type = None

    @extend_schema(
        tags=["journal"],
        request=JournalCreateSerializer,
        responses={201: JournalPostingSerializer, 400: dict, 409: dict},
    )
    def post(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_journal(
                transaction_type=self.transaction_type,
                details=s.validated_data.get("details") or {},
                user_id=get_request_user_id(request),
                store_uuid=store_uuid,
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(_posting_payload(result), status=status.HTTP_201_CREATED)


class StockAdjustmentView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = StockAdjustmentSerializer

    @extend_schema(
        tags=["journal"],
        request=StockAdjustmentSerializer,
        responses={200: JournalPostingSerializer, 201: JournalPostingSerializer, 400: dict},
    )
    def post(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = process_stock_adjustment(
                adjustments=s.validated_data["adjustments"],
                user_id=get_request_user_id(request),
                store_uuid=store_uuid,
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        if result is None:
            return Response(
                _posting_payload(None, message="No stock changes to journal"),
                status=status.HTTP_200_OK,
            )
        return Response(_posting_payload(result), status=status.HTTP_201_CREATED)


class JournalReportView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalSerializer

    @extend_schema(tags=["journal"], responses=JournalSerializer(many=True))
    def get(self, request, transaction_type=None, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            qs = find_all_by_type(type_prefix=transaction_type, store_uuid=store_uuid)
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(JournalSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class JournalVerifyView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalSerializer

    @extend_schema(tags=["journal"], request=None, responses={200: JournalSerializer, 404: dict})
    def post(self, request, code, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        try:
            journal = verify_journal(
                code=code,
                user_id=get_request_user_id(request),
                store_uuid=store_uuid,
            )
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(JournalSerializer(journal).data, status=status.HTTP_200_OK)


class JournalChartView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ChartPointSerializer

    @extend_schema(
        tags=["journal"],
        parameters=[
            OpenApiParameter("startDate", str, description="YYYY-MM-DD (default: 7 days ago)"),
            OpenApiParameter("endDate", str, description="YYYY-MM-DD (default: today)"),
        ],
        responses=ChartPointSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        store_uuid = require_store_uuid(request)

        q = DateRangeQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)

        start_date = q.validated_data.get("start_date")
        end_date = q.validated_data.get("end_date")
        if not start_date or not end_date:
            start_date, end_date = default_chart_range()

        try:
            rows = get_chart_data(store_uuid=store_uuid, start_date=start_date, end_date=end_date)
        except AccountingServiceError as exc:
            return ledger_error_response(exc)

        return Response(ChartPointSerializer(rows, many=True).data, status=status.HTTP_200_OK)
