# accounting/tests/test_report_service.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import Journal, JournalDetail
from accounting.services.account_service import initialize_standard_accounts
from accounting.services.exceptions import LedgerValidationError
from accounting.services.journal_config_service import remove_config, replace_configs
from accounting.services.journal_service import create_journal
from accounting.services.report_service import (
    get_chart_data,
    get_financial_report,
    normalize_date_range,
    parse_amount,
)
from store.models import Store

STORE = "STR-1"


def _by_code(rows):
    return {r["code"]: r for r in rows}


class ParseAmountTests(TestCase):
    def test_permissive_parsing(self):
        self.assertEqual(parse_amount("50000"), Decimal("50000"))
        self.assertEqual(parse_amount(" 12.5 "), Decimal("12.5"))
        self.assertEqual(parse_amount("abc"), Decimal("0"))
        self.assertEqual(parse_amount(""), Decimal("0"))
        self.assertEqual(parse_amount(None), Decimal("0"))
        self.assertEqual(parse_amount("NaN"), Decimal("0"))
        self.assertEqual(parse_amount('{"a":1}'), Decimal("0"))

    def test_date_range_is_closed_on_both_ends(self):
        start, end = normalize_date_range("2026-03-01", "2026-03-31")
        self.assertEqual((start.hour, start.minute, start.second), (0, 0, 0))
        self.assertEqual((end.hour, end.minute, end.second), (23, 59, 59))
        self.assertEqual(end.microsecond, 999999)

        with self.assertRaises(LedgerValidationError):
            normalize_date_range("2026-03-31", "2026-03-01")
        with self.assertRaises(LedgerValidationError):
            normalize_date_range("yesterday", "2026-03-01")


class FinancialReportTests(TestCase):
    def setUp(self):
        Store.objects.create(uuid=STORE, name="Main")
        Store.objects.create(uuid="STR-2", name="Branch")
        initialize_standard_accounts(store_uuid=STORE)
        initialize_standard_accounts(store_uuid="STR-2")

        accounts = Account.objects.filter(store_id=STORE)
        self.cash = accounts.get(code="1-1001")
        self.bank = accounts.get(code="1-1002")
        self.receivable = accounts.get(code="1-2001")
        self.revenue = accounts.get(code="4-1001")
        self.purchases = accounts.get(code="6-1001")

        self._rule("SALE", "grand_total", [("DEBIT", self.cash), ("CREDIT", self.revenue)])
        self._rule("BUY", "nominal_ar", [("DEBIT", self.receivable), ("DEBIT", self.bank)])
        self._rule("BUY", "grand_total", [("DEBIT", self.purchases), ("CREDIT", self.cash)])

        self.today = timezone.localdate()

    def _rule(self, tx, key, items, match_mode=None):
        return replace_configs(
            store_uuid=STORE,
            transaction_type=tx,
            detail_key=key,
            items=[{"position": p, "account_uuid": a.uuid} for p, a in items],
            user_id="U1",
            match_mode=match_mode,
        )

    def _report(self, start=None, end=None):
        return get_financial_report(
            store_uuid=STORE,
            start_date=start or self.today,
            end_date=end or self.today,
        )

    def test_every_account_in_code_order_even_without_activity(self):
        rows = self._report()
        self.assertEqual(len(rows), 10)
        self.assertEqual([r["code"] for r in rows], sorted(r["code"] for r in rows))
        self.assertTrue(all(r["debit"] == 0 and r["credit"] == 0 for r in rows))

    def test_balances_follow_normal_balance(self):
        create_journal(
            transaction_type="SALE", details={"grand_total": 50000}, user_id="U1", store_uuid=STORE
        )
        create_journal(
            transaction_type="BUY", details={"grand_total": 20000}, user_id="U1", store_uuid=STORE
        )

        rows = _by_code(self._report())

        self.assertEqual(rows["1-1001"]["debit"], 50000.0)
        self.assertEqual(rows["1-1001"]["credit"], 20000.0)
        self.assertEqual(rows["1-1001"]["balance"], 30000.0)

        self.assertEqual(rows["4-1001"]["credit"], 50000.0)
        self.assertEqual(rows["4-1001"]["balance"], 50000.0)
        self.assertEqual(rows["4-1001"]["normal_balance"], "CREDIT")

        self.assertEqual(rows["6-1001"]["balance"], 20000.0)

    def test_split_posting_accumulates_on_every_account(self):
        create_journal(
            transaction_type="BUY", details={"nominal_ar": "1500"}, user_id="U1", store_uuid=STORE
        )
        rows = _by_code(self._report())
        self.assertEqual(rows["1-2001"]["debit"], 1500.0)
        self.assertEqual(rows["1-1002"]["debit"], 1500.0)

    def test_item_keys_post_through_the_longest_prefix_rule(self):
        self._rule("STOCK_ADJUSTMENT", "stok_", [("CREDIT", self.cash)])
        specific = self._rule(
            "STOCK_ADJUSTMENT", "stok_qty_min", [("DEBIT", self.purchases)], match_mode="PREFIX"
        )
        create_journal(
            transaction_type="STOCK_ADJUSTMENT",
            details={
                "items": [
                    {"stok_product_uuid": "P1", "stok_qty_min": 2},
                    {"stok_product_uuid": "P2", "stok_qty_plus": 5},
                ]
            },
            user_id="U1",
            store_uuid=STORE,
        )

        rows = _by_code(self._report())
        self.assertEqual(rows["6-1001"]["debit"], 2.0)
        self.assertEqual(rows["6-1001"]["credit"], 0.0)
        self.assertEqual(rows["1-1001"]["credit"], 5.0)
        self.assertEqual(rows["1-1001"]["debit"], 0.0)

        remove_config(store_uuid=STORE, uuid=specific[0].uuid, user_id="U1")

        rows = _by_code(self._report())
        self.assertEqual(rows["6-1001"]["debit"], 0.0)
        self.assertEqual(rows["1-1001"]["credit"], 7.0)

    def test_unmapped_and_non_numeric_values_contribute_nothing(self):
        create_journal(
            transaction_type="SALE",
            details={"grand_total": "not-a-number", "customer": "Walk-in", "discount": 10},
            user_id="U1",
            store_uuid=STORE,
        )
        rows = self._report()
        self.assertTrue(all(r["debit"] == 0 and r["credit"] == 0 for r in rows))

    def test_other_stores_journals_are_ignored(self):
        create_journal(
            transaction_type="SALE", details={"grand_total": 777}, user_id="U1", store_uuid="STR-2"
        )
        rows = _by_code(self._report())
        self.assertEqual(rows["1-1001"]["debit"], 0.0)

    def test_date_range_limits_journals(self):
        old = create_journal(
            transaction_type="SALE", details={"grand_total": 100}, user_id="U1", store_uuid=STORE
        ).journal
        Journal.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=3))

        create_journal(
            transaction_type="SALE", details={"grand_total": 40}, user_id="U1", store_uuid=STORE
        )

        today_only = _by_code(self._report())
        self.assertEqual(today_only["1-1001"]["debit"], 40.0)

        wide = _by_code(self._report(start=self.today - timedelta(days=7)))
        self.assertEqual(wide["1-1001"]["debit"], 140.0)

    def test_report_is_idempotent(self):
        create_journal(
            transaction_type="SALE", details={"grand_total": 12.5}, user_id="U1", store_uuid=STORE
        )
        self.assertEqual(self._report(), self._report())

    def test_report_requires_store(self):
        with self.assertRaises(LedgerValidationError):
            get_financial_report(store_uuid="", start_date=self.today, end_date=self.today)

    def test_chart_data_groups_sale_and_buy_per_day(self):
        create_journal(
            transaction_type="SALE", details={"grand_total": 100}, user_id="U1", store_uuid=STORE
        )
        create_journal(
            transaction_type="SALE", details={"grand_total": 50}, user_id="U1", store_uuid=STORE
        )
        create_journal(
            transaction_type="BUY", details={"grand_total": 40}, user_id="U1", store_uuid=STORE
        )
        create_journal(
            transaction_type="AR", details={"grand_total": 999}, user_id="U1", store_uuid=STORE
        )

        points = get_chart_data(
            store_uuid=STORE,
            start_date=self.today - timedelta(days=7),
            end_date=self.today,
        )

        self.assertEqual(
            points,
            [{"date": self.today.isoformat(), "total_sale": 150.0, "total_buy": 40.0}],
        )
        self.assertEqual(JournalDetail.objects.filter(key="grand_total").count(), 4)
