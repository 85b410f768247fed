# accounting/api/serializers/reports.py

from rest_framework import serializers


class DateRangeQuerySerializer(serializers.Serializer):
    startDate = serializers.DateField(source="start_date", required=False)
    endDate = serializers.DateField(source="end_date", required=False)


class FinancialReportRowSerializer(serializers.Serializer):
    uuid = serializers.CharField()
    code = serializers.CharField()
    name = serializers.CharField()
    category = serializers.CharField()
    normalBalance = serializers.CharField(source="normal_balance")
    debit = serializers.FloatField()
    credit = serializers.FloatField()
    balance = serializers.FloatField()


class ChartPointSerializer(serializers.Serializer):
    date = serializers.CharField()
    totalSale = serializers.FloatField(source="total_sale")
    totalBuy = serializers.FloatField(source="total_buy")
