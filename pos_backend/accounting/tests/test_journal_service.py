# accounting/tests/test_journal_service.py

from __future__ import annotations

from datetime import date
from unittest import mock

from django.db import DatabaseError, IntegrityError, transaction
from django.db.models.query import QuerySet
from django.test import TestCase, override_settings
from django.utils import timezone

from accounting.models.journal import Journal, JournalDetail
from accounting.services import journal_service
from accounting.services.exceptions import (
    JournalCodeConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from accounting.services.journal_service import (
    create_journal,
    find_all_by_type,
    generate_code,
    parse_code_sequence,
    post_side_journal,
    process_stock_adjustment,
    verify_journal,
)

STORE = "STR-1"
USER = "U1"


def _today():
    return timezone.localdate().strftime("%Y%m%d")


def _make_journal(code):
    return Journal.objects.create(uuid=f"{code}-uuid", code=code, created_by=USER)


class CreateJournalTests(TestCase):
    def test_sale_journal_end_to_end(self):
        result = create_journal(
            transaction_type="SALE",
            details={
                "grand_total": 50000,
                "items": [{"stok_product_uuid": "P1", "stok_qty_min": 2}],
            },
            user_id=USER,
            store_uuid=STORE,
        )

        journal = result.journal
        self.assertEqual(journal.code, f"SALE-STR-1-{_today()}-0001")
        self.assertEqual(journal.created_by, USER)
        self.assertEqual(journal.verified_by, USER)
        self.assertIsNotNone(journal.verified_at)
        self.assertEqual(result.message, "SALE journal created")

        rows = list(
            JournalDetail.objects.filter(journal=journal).values_list("key", "value")
        )
        self.assertEqual(
            rows,
            [
                ("grand_total", "50000"),
                ("stok_product_uuid#0", "P1"),
                ("stok_qty_min#0", "2"),
            ],
        )
        self.assertTrue(all(d.created_by == USER for d in result.details))

    def test_codes_increment_within_the_day_bucket(self):
        codes = [
            create_journal(
                transaction_type="SALE", details={"n": i}, user_id=USER, store_uuid=STORE
            ).journal.code
            for i in range(3)
        ]

        self.assertEqual([parse_code_sequence(c) for c in codes], [1, 2, 3])

        other_type = create_journal(
            transaction_type="BUY", details={}, user_id=USER, store_uuid=STORE
        )
        self.assertEqual(parse_code_sequence(other_type.journal.code), 1)

        other_store = create_journal(
            transaction_type="SALE", details={}, user_id=USER, store_uuid="STR-2"
        )
        self.assertEqual(parse_code_sequence(other_store.journal.code), 1)

    def test_generate_code_orders_past_four_digits(self):
        day = date(2026, 1, 31)
        _make_journal("SALE-STR-1-20260131-9999")
        _make_journal("SALE-STR-1-20260131-10000")

        self.assertEqual(
            generate_code("SALE", STORE, day=day),
            "SALE-STR-1-20260131-10001",
        )

    def test_only_null_details_create_header_without_rows(self):
        result = create_journal(
            transaction_type="SALE",
            details={"a": None, "b": None},
            user_id=USER,
            store_uuid=STORE,
        )
        self.assertEqual(result.details, [])
        self.assertEqual(JournalDetail.objects.count(), 0)
        self.assertEqual(Journal.objects.count(), 1)

    def test_empty_items_create_no_item_rows(self):
        result = create_journal(
            transaction_type="SALE",
            details={"grand_total": 10, "items": []},
            user_id=USER,
            store_uuid=STORE,
        )
        self.assertEqual([d.key for d in result.details], ["grand_total"])

    def test_missing_store_is_rejected(self):
        for store_uuid in ("", "   ", None):
            with self.assertRaises(LedgerValidationError):
                create_journal(
                    transaction_type="SALE",
                    details={"grand_total": 1},
                    user_id=USER,
                    store_uuid=store_uuid,
                )
        self.assertEqual(Journal.objects.count(), 0)

    def test_transaction_type_must_be_a_plain_tag(self):
        for bad in ("", "SALE-X", "SALE X"):
            with self.assertRaises(LedgerValidationError):
                create_journal(
                    transaction_type=bad, details={}, user_id=USER, store_uuid=STORE
                )

    @override_settings(JOURNAL_DETAIL_VALUE_MAX_LENGTH=10)
    def test_long_values_are_truncated(self):
        result = create_journal(
            transaction_type="SALE",
            details={"note": "abcdefghijklmnop"},
            user_id=USER,
            store_uuid=STORE,
        )
        self.assertEqual(result.details[0].value, "abcdefghij")

    def test_failure_while_writing_details_leaves_nothing_behind(self):
        with mock.patch(
            "django.db.models.query.QuerySet.bulk_create",
            side_effect=DatabaseError("disk full"),
        ):
            with self.assertRaises(DatabaseError):
                create_journal(
                    transaction_type="SALE",
                    details={"grand_total": 1},
                    user_id=USER,
                    store_uuid=STORE,
                )

        self.assertEqual(Journal.objects.count(), 0)
        self.assertEqual(JournalDetail.objects.count(), 0)

    def test_code_conflict_is_retried_with_a_fresh_code(self):
        taken = _make_journal(f"SALE-STR-1-{_today()}-0001")
        fresh = f"SALE-STR-1-{_today()}-0002"

        with mock.patch.object(
            journal_service, "generate_code", side_effect=[taken.code, fresh]
        ):
            result = create_journal(
                transaction_type="SALE",
                details={"grand_total": 5},
                user_id=USER,
                store_uuid=STORE,
            )

        self.assertEqual(result.journal.code, fresh)
        self.assertEqual(Journal.objects.count(), 2)

    @override_settings(JOURNAL_CODE_MAX_RETRIES=3)
    def test_code_conflict_gives_up_after_max_retries(self):
        taken = _make_journal(f"SALE-STR-1-{_today()}-0001")

        with mock.patch.object(
            journal_service, "generate_code", return_value=taken.code
        ) as generate:
            with self.assertRaises(JournalCodeConflictError) as ctx:
                create_journal(
                    transaction_type="SALE",
                    details={"grand_total": 5},
                    user_id=USER,
                    store_uuid=STORE,
                )

        self.assertEqual(generate.call_count, 3)
        self.assertIsInstance(ctx.exception.__cause__, IntegrityError)
        self.assertEqual(Journal.objects.count(), 1)

    def test_other_integrity_errors_propagate_without_retry(self):
        with mock.patch.object(
            journal_service, "generate_code", wraps=journal_service.generate_code
        ) as generate:
            with mock.patch(
                "django.db.models.query.QuerySet.bulk_create",
                side_effect=IntegrityError("FOREIGN KEY constraint failed"),
            ):
                with self.assertRaises(IntegrityError) as ctx:
                    create_journal(
                        transaction_type="SALE",
                        details={"grand_total": 1},
                        user_id=USER,
                        store_uuid=STORE,
                    )

        self.assertNotIsInstance(ctx.exception, JournalCodeConflictError)
        self.assertEqual(str(ctx.exception), "FOREIGN KEY constraint failed")
        self.assertEqual(generate.call_count, 1)
        self.assertEqual(Journal.objects.count(), 0)

    def test_code_allocation_reads_the_bucket_with_a_lock(self):
        original = QuerySet.select_for_update

        with mock.patch.object(
            QuerySet, "select_for_update", autospec=True, side_effect=original
        ) as locking:
            result = create_journal(
                transaction_type="SALE",
                details={"grand_total": 1},
                user_id=USER,
                store_uuid=STORE,
            )

        self.assertEqual(result.journal.code, f"SALE-STR-1-{_today()}-0001")
        self.assertTrue(locking.called)
        self.assertIs(locking.call_args[0][0].model, Journal)

    def test_retry_inside_callers_transaction_takes_the_next_code(self):
        taken = _make_journal(f"SALE-STR-1-{_today()}-0001")
        fresh = f"SALE-STR-1-{_today()}-0002"

        with transaction.atomic():
            with mock.patch.object(
                journal_service, "generate_code", side_effect=[taken.code, fresh]
            ):
                result = create_journal(
                    transaction_type="SALE",
                    details={"grand_total": 5},
                    user_id=USER,
                    store_uuid=STORE,
                )

        self.assertEqual(result.journal.code, fresh)
        self.assertEqual(Journal.objects.count(), 2)

    def test_joins_the_callers_transaction(self):
        with self.assertRaises(RuntimeError):
            with transaction.atomic():
                create_journal(
                    transaction_type="SALE",
                    details={"grand_total": 1},
                    user_id=USER,
                    store_uuid=STORE,
                )
                raise RuntimeError("caller failed after posting")

        self.assertEqual(Journal.objects.count(), 0)


class StockAdjustmentTests(TestCase):
    def test_diffs_become_plus_and_min_items(self):
        result = process_stock_adjustment(
            adjustments=[
                {"product_uuid": "P1", "unit_uuid": "U-PCS", "old_qty": 10, "new_qty": 12},
                {"product_uuid": "P2", "unit_uuid": "U-PCS", "old_qty": 5, "new_qty": 5},
                {"product_uuid": "P3", "unit_uuid": "U-BOX", "old_qty": "8", "new_qty": "6.5"},
            ],
            user_id=USER,
            store_uuid=STORE,
        )

        self.assertTrue(result.journal.code.startswith(f"STOCK_ADJUSTMENT-STR-1-{_today()}-"))
        self.assertEqual(
            [(d.key, d.value) for d in result.details],
            [
                ("stok_product_uuid#0", "P1"),
                ("stok_unit_uuid#0", "U-PCS"),
                ("stok_qty_plus#0", "2"),
                ("stok_product_uuid#1", "P3"),
                ("stok_unit_uuid#1", "U-BOX"),
                ("stok_qty_min#1", "1.5"),
            ],
        )

    def test_no_changes_writes_no_journal(self):
        result = process_stock_adjustment(
            adjustments=[
                {"product_uuid": "P1", "unit_uuid": "U", "old_qty": 3, "new_qty": 3}
            ],
            user_id=USER,
            store_uuid=STORE,
        )
        self.assertIsNone(result)
        self.assertEqual(Journal.objects.count(), 0)

    def test_invalid_quantity_is_rejected(self):
        with self.assertRaises(LedgerValidationError):
            process_stock_adjustment(
                adjustments=[
                    {"product_uuid": "P1", "unit_uuid": "U", "old_qty": "x", "new_qty": 3}
                ],
                user_id=USER,
                store_uuid=STORE,
            )


class JournalQueryTests(TestCase):
    def setUp(self):
        self.sale_1 = create_journal(
            transaction_type="SALE", details={"grand_total": 1}, user_id=USER, store_uuid=STORE
        ).journal
        self.sale_2 = create_journal(
            transaction_type="SALE", details={"grand_total": 2}, user_id=USER, store_uuid=STORE
        ).journal
        self.buy = create_journal(
            transaction_type="BUY", details={"grand_total": 3}, user_id=USER, store_uuid=STORE
        ).journal
        create_journal(
            transaction_type="SALE", details={"grand_total": 4}, user_id=USER, store_uuid="STR-2"
        )

    def test_find_by_type_is_store_scoped_newest_first(self):
        journals = list(find_all_by_type(type_prefix="SALE", store_uuid=STORE))
        self.assertEqual([j.code for j in journals], [self.sale_2.code, self.sale_1.code])

        details = list(journals[0].details.all())
        self.assertEqual([(d.key, d.value) for d in details], [("grand_total", "2")])

    def test_find_without_type_returns_every_store_journal(self):
        codes = {j.code for j in find_all_by_type(type_prefix=None, store_uuid=STORE)}
        self.assertEqual(codes, {self.sale_1.code, self.sale_2.code, self.buy.code})

    def test_created_journal_round_trips_every_field(self):
        details = {"grand_total": 75, "customer": "Walk-in", "paid": True}
        journal = create_journal(
            transaction_type="PAY_AR", details=details, user_id=USER, store_uuid=STORE
        ).journal

        found = find_all_by_type(type_prefix="PAY_AR", store_uuid=STORE).get(code=journal.code)
        self.assertEqual(
            {d.key: d.value for d in found.details.all()},
            {"grand_total": "75", "customer": "Walk-in", "paid": "true"},
        )


class VerifyJournalTests(TestCase):
    def test_verification_is_idempotent(self):
        journal = create_journal(
            transaction_type="SALE", details={}, user_id=USER, store_uuid=STORE
        ).journal
        Journal.objects.filter(pk=journal.pk).update(verified_by=None, verified_at=None)

        first = verify_journal(code=journal.code, user_id="U2", store_uuid=STORE)
        second = verify_journal(code=journal.code, user_id="U3", store_uuid=STORE)

        self.assertEqual(first.verified_by, "U2")
        self.assertEqual(second.verified_by, "U2")
        self.assertEqual(first.verified_at, second.verified_at)

    def test_journal_of_another_store_is_not_found(self):
        journal = create_journal(
            transaction_type="SALE", details={}, user_id=USER, store_uuid="STR-2"
        ).journal
        with self.assertRaises(LedgerNotFoundError):
            verify_journal(code=journal.code, user_id=USER, store_uuid=STORE)


class SideJournalTests(TestCase):
    def test_failure_is_swallowed_and_logged(self):
        with self.assertLogs("accounting.services.journal_service", level="ERROR"):
            result = post_side_journal(
                transaction_type="TABLE BOOKED",
                details={"table": "T1"},
                user_id=USER,
                store_uuid=STORE,
            )
        self.assertIsNone(result)

    def test_primary_work_survives_a_failed_side_journal(self):
        taken = _make_journal(f"TABLE_OCCUPIED-STR-1-{_today()}-0001")

        with transaction.atomic():
            primary = create_journal(
                transaction_type="SALE", details={"grand_total": 9}, user_id=USER, store_uuid=STORE
            )
            with mock.patch.object(journal_service, "generate_code", return_value=taken.code):
                with self.assertLogs("accounting.services.journal_service", level="ERROR"):
                    side = post_side_journal(
                        transaction_type="TABLE_OCCUPIED",
                        details={"table": "T1"},
                        user_id=USER,
                        store_uuid=STORE,
                    )

        self.assertIsNone(side)
        self.assertTrue(Journal.objects.filter(code=primary.journal.code).exists())

    def test_success_returns_the_posting(self):
        result = post_side_journal(
            transaction_type="TABLE_CLEARED",
            details={"table": "T1"},
            user_id=USER,
            store_uuid=STORE,
        )
        self.assertTrue(result.journal.code.startswith("TABLE_CLEARED-STR-1-"))
