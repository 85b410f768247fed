# accounting/tests/test_journal_config_service.py

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal_config import JournalConfig
from accounting.services.account_service import initialize_standard_accounts
from accounting.services.exceptions import LedgerNotFoundError, LedgerValidationError
from accounting.services.journal_config_service import (
    get_discovery,
    list_configs,
    remove_config,
    replace_configs,
)
from accounting.services.journal_service import create_journal
from store.models import Store


class JournalConfigServiceTests(TestCase):
    def setUp(self):
        self.store = Store.objects.create(uuid="STR-1", name="Main")
        initialize_standard_accounts(store_uuid="STR-1")
        self.cash = Account.objects.get(store=self.store, code="1-1001")
        self.bank = Account.objects.get(store=self.store, code="1-1002")
        self.revenue = Account.objects.get(store=self.store, code="4-1001")

    def test_replace_creates_one_rule_per_item(self):
        rules = replace_configs(
            store_uuid="STR-1",
            transaction_type="BUY",
            detail_key="nominal_ar",
            items=[
                {"position": "DEBIT", "account_uuid": self.cash.uuid},
                {"position": "DEBIT", "account_uuid": self.bank.uuid},
            ],
            user_id="U1",
        )

        self.assertEqual(len(rules), 2)
        self.assertTrue(all(r.match_mode == JournalConfig.EXACT for r in rules))
        self.assertTrue(all(r.uuid.startswith("STR-1-CFG-") for r in rules))
        self.assertEqual(rules[0].created_by, "U1")

    def test_replace_soft_deletes_previous_rules(self):
        for account in (self.cash, self.bank):
            replace_configs(
                store_uuid="STR-1",
                transaction_type="SALE",
                detail_key="grand_total",
                items=[{"position": "DEBIT", "account_uuid": account.uuid}],
                user_id="U1",
            )

        active = list(list_configs(store_uuid="STR-1"))
        self.assertEqual([c.account_id for c in active], [self.bank.uuid])

        deleted = JournalConfig.all_objects.filter(deleted_at__isnull=False)
        self.assertEqual(deleted.count(), 1)
        self.assertEqual(deleted.get().deleted_by, "U1")

    def test_replaced_rules_get_a_fresh_updated_at(self):
        rule = replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="grand_total",
            items=[{"position": "DEBIT", "account_uuid": self.cash.uuid}],
            user_id="U1",
        )[0]
        stale = timezone.now() - timedelta(days=3)
        JournalConfig.objects.filter(uuid=rule.uuid).update(updated_at=stale)

        replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="grand_total",
            items=[{"position": "DEBIT", "account_uuid": self.bank.uuid}],
            user_id="U2",
        )

        replaced = JournalConfig.all_objects.get(uuid=rule.uuid)
        self.assertIsNotNone(replaced.deleted_at)
        self.assertEqual(replaced.updated_by, "U2")
        self.assertGreater(replaced.updated_at, stale)

    def test_empty_items_clear_the_pair(self):
        replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="grand_total",
            items=[{"position": "DEBIT", "account_uuid": self.cash.uuid}],
            user_id="U1",
        )
        replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="grand_total",
            items=[],
            user_id="U1",
        )
        self.assertFalse(list_configs(store_uuid="STR-1").exists())

    def test_match_mode_inferred_or_explicit(self):
        prefix = replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="stok_",
            items=[{"position": "CREDIT", "account_uuid": self.revenue.uuid}],
            user_id="U1",
        )[0]
        exact = replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="tax_",
            match_mode="EXACT",
            items=[{"position": "CREDIT", "account_uuid": self.revenue.uuid}],
            user_id="U1",
        )[0]

        self.assertEqual(prefix.match_mode, JournalConfig.PREFIX)
        self.assertTrue(prefix.is_prefix)
        self.assertEqual(exact.match_mode, JournalConfig.EXACT)
        self.assertFalse(exact.is_prefix)

    def test_invalid_input(self):
        with self.assertRaises(LedgerNotFoundError):
            replace_configs(
                store_uuid="STR-1",
                transaction_type="SALE",
                detail_key="grand_total",
                items=[{"position": "DEBIT", "account_uuid": "STR-1-ACC-nope"}],
                user_id="U1",
            )
        with self.assertRaises(LedgerValidationError):
            replace_configs(
                store_uuid="STR-1",
                transaction_type="SALE",
                detail_key="grand_total",
                items=[{"position": "SIDEWAYS", "account_uuid": self.cash.uuid}],
                user_id="U1",
            )
        with self.assertRaises(LedgerValidationError):
            replace_configs(
                store_uuid="STR-1",
                transaction_type="SALE",
                detail_key="  ",
                items=[],
                user_id="U1",
            )

    def test_remove_is_soft(self):
        rule = replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="grand_total",
            items=[{"position": "DEBIT", "account_uuid": self.cash.uuid}],
            user_id="U1",
        )[0]

        remove_config(store_uuid="STR-1", uuid=rule.uuid, user_id="U2")

        self.assertFalse(JournalConfig.objects.filter(uuid=rule.uuid).exists())
        stored = JournalConfig.all_objects.get(uuid=rule.uuid)
        self.assertTrue(stored.is_deleted)
        self.assertEqual(stored.deleted_by, "U2")

        with self.assertRaises(LedgerNotFoundError):
            remove_config(store_uuid="STR-1", uuid=rule.uuid, user_id="U2")

    def test_discovery_reports_usage_and_mapping(self):
        replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="grand_total",
            items=[{"position": "DEBIT", "account_uuid": self.cash.uuid}],
            user_id="U1",
        )
        replace_configs(
            store_uuid="STR-1",
            transaction_type="SALE",
            detail_key="stok_qty_",
            items=[{"position": "CREDIT", "account_uuid": self.revenue.uuid}],
            user_id="U1",
        )
        for total in (100, 250):
            create_journal(
                transaction_type="SALE",
                details={
                    "grand_total": total,
                    "items": [{"stok_product_uuid": "P1", "stok_qty_min": 2}],
                },
                user_id="U1",
                store_uuid="STR-1",
            )
        create_journal(
            transaction_type="SALE",
            details={"grand_total": 999},
            user_id="U1",
            store_uuid="STR-2",
        )

        rows = {(r["transaction_type"], r["detail_key"]): r for r in get_discovery(store_uuid="STR-1")}

        self.assertEqual(
            sorted(rows),
            [
                ("SALE", "grand_total"),
                ("SALE", "stok_product_uuid#0"),
                ("SALE", "stok_qty_min#0"),
            ],
        )

        grand_total = rows[("SALE", "grand_total")]
        self.assertEqual(grand_total["frequency"], 2)
        self.assertEqual(grand_total["total_value"], 350.0)
        self.assertTrue(grand_total["is_mapped"])
        self.assertFalse(grand_total["is_wildcard"])
        self.assertEqual(grand_total["configs"][0]["account_code"], "1-1001")

        qty = rows[("SALE", "stok_qty_min#0")]
        self.assertTrue(qty["is_mapped"])
        self.assertTrue(qty["is_wildcard"])
        self.assertEqual(qty["configs"][0]["detail_key_source"], "stok_qty_")

        product = rows[("SALE", "stok_product_uuid#0")]
        self.assertFalse(product["is_mapped"])
        self.assertEqual(product["total_value"], 0.0)

        filtered = get_discovery(store_uuid="STR-1", prefix="stok_")
        self.assertEqual(len(filtered), 2)
