# accounting/services/report_service.py

"""
======================================================
PATH: accounting/services/report_service.py
======================================================
FINANCIAL REPORT SERVICE

Derives account balances from raw journal details:

1. [start 00:00:00, end 23:59:59.999999] in the active timezone
2. accounts of the store, code order
3. every posting rule of the store (one snapshot)
4. details of the store's journals created inside the range
   (store scope = "-{storeUuid}-" inside journal.code)
5. value -> number (permissive: anything unparseable counts as 0)
6. type = journal code up to the first hyphen; each matching rule adds the
   value to its account's debit or credit
7. balance follows the account's normal balance

Read-only, no locking. Sums are Decimal internally; output is JSON-safe floats.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from decimal import Decimal, InvalidOperation

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from accounting.models.account import Account
from accounting.models.journal import JournalDetail
from accounting.models.journal_config import JournalConfig
from accounting.services.config_resolver import PostingRule, PostingRuleIndex
from accounting.services.exceptions import LedgerValidationError

ZERO = Decimal("0")

GRAND_TOTAL_KEY = "grand_total"
CHART_DEFAULT_DAYS = 7


def parse_amount(value) -> Decimal:
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return ZERO
    if not amount.is_finite():
        return ZERO
    return amount


def _coerce_date(value, *, field: str) -> date:
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.date()
    if isinstance(value, date):
        return value

    text = (value or "").strip()
    parsed = parse_date(text)
    if parsed is None:
        parsed_dt = parse_datetime(text)
        if parsed_dt is not None:
            return _coerce_date(parsed_dt, field=field)
        raise LedgerValidationError(f"Invalid {field}: {value!r} (expected YYYY-MM-DD)")
    return parsed


def normalize_date_range(start_date, end_date) -> tuple[datetime, datetime]:
    start_day = _coerce_date(start_date, field="startDate")
    end_day = _coerce_date(end_date, field="endDate")
    if start_day > end_day:
        raise LedgerValidationError("startDate must not be after endDate")

    tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(start_day, time.min), tz)
    end = timezone.make_aware(datetime.combine(end_day, time.max), tz)
    return start, end


def default_report_range(today: date | None = None) -> tuple[date, date]:
    today = today or timezone.localdate()
    return today.replace(day=1), today


def default_chart_range(today: date | None = None) -> tuple[date, date]:
    today = today or timezone.localdate()
    return today - timedelta(days=CHART_DEFAULT_DAYS), today


class FinancialReportService:
    """
    Account balances for one store over a closed date range.

    Guarantees:
    - every account of the store appears, including ones without activity
    - rules snapshot is read once per report
    - unmapped detail keys contribute nothing (not an error)
    - same range, no writes in between -> identical output
    """

    def __init__(
        self,
        account_model=Account,
        detail_model=JournalDetail,
        config_model=JournalConfig,
    ):
        self.Account = account_model
        self.Detail = detail_model
        self.Config = config_model

    def totals_by_account(self, *, store_uuid: str, start: datetime, end: datetime):
        rules = PostingRuleIndex(
            PostingRule.from_config(config)
            for config in self.Config.objects.filter(store_id=store_uuid)
        )

        debit = defaultdict(lambda: ZERO)
        credit = defaultdict(lambda: ZERO)

        if not len(rules):
            return debit, credit

        details = (
            self.Detail.objects.filter(
                journal__code__contains=f"-{store_uuid}-",
                journal__created_at__gte=start,
                journal__created_at__lte=end,
            )
            .values_list("journal_id", "key", "value")
            .iterator()
        )

        for journal_code, key, raw_value in details:
            amount = parse_amount(raw_value)
            if amount == ZERO:
                continue

            transaction_type = journal_code.split("-", 1)[0]
            for rule in rules.resolve(transaction_type, key):
                if rule.position == self.Config.DEBIT:
                    debit[rule.account_uuid] += amount
                else:
                    credit[rule.account_uuid] += amount

        return debit, credit

    def generate(self, *, store_uuid: str, start_date, end_date) -> list[dict]:
        store_uuid = (store_uuid or "").strip()
        if not store_uuid:
            raise LedgerValidationError("Store is required")

        start, end = normalize_date_range(start_date, end_date)

        accounts = list(
            self.Account.objects.filter(store_id=store_uuid)
            .only("uuid", "code", "name", "category", "normal_balance")
            .order_by("code")
        )

        debit_by_account, credit_by_account = self.totals_by_account(
            store_uuid=store_uuid, start=start, end=end
        )

        rows = []
        for acc in accounts:
            debit = debit_by_account.get(acc.uuid, ZERO)
            credit = credit_by_account.get(acc.uuid, ZERO)

            if acc.normal_balance == self.Account.DEBIT:
                balance = debit - credit
            else:
                balance = credit - debit

            rows.append(
                {
                    "uuid": acc.uuid,
                    "code": acc.code,
                    "name": acc.name,
                    "category": acc.category,
                    "normal_balance": acc.normal_balance,
                    "debit": float(debit),
                    "credit": float(credit),
                    "balance": float(balance),
                }
            )
        return rows


def get_financial_report(*, store_uuid: str, start_date, end_date) -> list[dict]:
    return FinancialReportService().generate(
        store_uuid=store_uuid, start_date=start_date, end_date=end_date
    )


def get_chart_data(*, store_uuid: str, start_date, end_date) -> list[dict]:
    """
    Daily SALE vs BUY grand totals, ascending by day; days without either
    are omitted.
    """
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required")

    start, end = normalize_date_range(start_date, end_date)

    details = (
        JournalDetail.objects.filter(
            key=GRAND_TOTAL_KEY,
            journal__code__contains=f"-{store_uuid}-",
            journal__created_at__gte=start,
            journal__created_at__lte=end,
        )
        .values_list("journal_id", "journal__created_at", "value")
        .iterator()
    )

    days: dict[date, dict[str, Decimal]] = {}
    for journal_code, created_at, raw_value in details:
        transaction_type = journal_code.split("-", 1)[0]
        if transaction_type not in ("SALE", "BUY"):
            continue
        day = timezone.localtime(created_at).date()
        bucket = days.setdefault(day, {"SALE": ZERO, "BUY": ZERO})
        bucket[transaction_type] += parse_amount(raw_value)

    return [
        {
            "date": day.isoformat(),
            "total_sale": float(bucket["SALE"]),
            "total_buy": float(bucket["BUY"]),
        }
        for day, bucket in sorted(days.items())
    ]
