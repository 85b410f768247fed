# accounting/services/journal_service.py

"""
======================================================
PATH: accounting/services/journal_service.py
======================================================
JOURNAL SERVICE (POSTING ENGINE)

This module is the ONLY place allowed to:
- Allocate journal codes
- Create Journal + JournalDetail rows
- Guarantee atomicity (header + details commit together or not at all)

Everything else (sale endpoints, stock adjustments, table events) must
pass through create_journal().

Unit of work:
- Every write runs inside transaction.atomic(using=...).
- Callers that already hold a transaction simply call us inside their own
  atomic block: our block becomes a savepoint of theirs.

Code allocation:
- journal.code is UNIQUE. Allocation reads the highest code of the
  (type, store, day) bucket and adds one; a concurrent writer that took the
  same code makes our insert fail, the savepoint rolls back and we retry
  with a fresh read (JOURNAL_CODE_MAX_RETRIES attempts).
- The read is a locking read, so a retry inside a caller's REPEATABLE READ
  transaction still sees the code the other writer committed.
- Only a collision on journal.code is retried. Any other IntegrityError
  propagates unchanged.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Iterable

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models.functions import Length
from django.utils import timezone

from accounting.models.journal import Journal, JournalDetail
from accounting.services.detail_flattening import (
    DEFAULT_VALUE_MAX_LENGTH,
    ITEMS_KEY,
    flatten_details,
)
from accounting.services.exceptions import (
    JournalCodeConflictError,
    LedgerNotFoundError,
    LedgerValidationError,
)
from store.identifiers import generate_journal_detail_uuid, generate_journal_uuid

logger = logging.getLogger(__name__)

STOCK_ADJUSTMENT = "STOCK_ADJUSTMENT"

SEQUENCE_WIDTH = 4

_TRANSACTION_TYPE_RE = re.compile(r"^[A-Za-z0-9_]+$")


@dataclass
class JournalPostingResult:
    message: str
    journal: Journal
    details: list[JournalDetail] = field(default_factory=list)


@dataclass(frozen=True)
class StockAdjustment:
    product_uuid: str
    unit_uuid: str
    old_qty: Decimal
    new_qty: Decimal

    @classmethod
    def coerce(cls, raw) -> "StockAdjustment":
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, Mapping):
            raise LedgerValidationError("Each stock adjustment must be an object")
        return cls(
            product_uuid=str(raw.get("product_uuid") or ""),
            unit_uuid=str(raw.get("unit_uuid") or ""),
            old_qty=_to_quantity(raw.get("old_qty")),
            new_qty=_to_quantity(raw.get("new_qty")),
        )


def _to_quantity(value) -> Decimal:
    if value is None or value == "":
        return Decimal("0")
    if isinstance(value, bool):
        raise LedgerValidationError("Quantity must be a number")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise LedgerValidationError(f"Invalid quantity: {value!r}") from exc


def _plain_number(value: Decimal):
    if value == value.to_integral_value():
        return int(value)
    return value.normalize()


def _max_retries() -> int:
    return max(1, int(getattr(settings, "JOURNAL_CODE_MAX_RETRIES", 5)))


def _value_max_length() -> int:
    return int(
        getattr(settings, "JOURNAL_DETAIL_VALUE_MAX_LENGTH", DEFAULT_VALUE_MAX_LENGTH)
    )


# ------------------------------------------------------------
# CODES
# ------------------------------------------------------------


def normalize_transaction_type(transaction_type: str) -> str:
    value = (transaction_type or "").strip()
    if not value:
        raise LedgerValidationError("Transaction type is required")
    if not _TRANSACTION_TYPE_RE.match(value):
        raise LedgerValidationError(
            f"Invalid transaction type {value!r}: use letters, digits and underscores only"
        )
    return value


def build_code_prefix(transaction_type: str, store_uuid: str, day: date) -> str:
    return f"{transaction_type}-{store_uuid}-{day:%Y%m%d}"


def parse_code_sequence(code: str) -> int:
    tail = (code or "").rsplit("-", 1)[-1]
    try:
        return int(tail)
    except ValueError:
        return 0


def transaction_type_from_code(code: str) -> str:
    return (code or "").split("-", 1)[0]


def store_code_fragment(store_uuid: str) -> str:
    return f"-{store_uuid}-"


def generate_code(
    transaction_type: str,
    store_uuid: str,
    *,
    day: date | None = None,
    using: str | None = None,
    for_update: bool = False,
) -> str:
    """
    Next code of the (type, store, day) bucket.

    Codes of equal length compare like their sequence numbers; ordering by
    length first keeps sequence 10000 above 9999.

    for_update=True makes the read a locking read (must run inside a
    transaction). Under REPEATABLE READ a locking read sees the latest
    committed codes instead of the transaction snapshot.
    """
    day = day or timezone.localdate()
    prefix = build_code_prefix(transaction_type, store_uuid, day)

    qs = Journal.objects.using(using).filter(code__startswith=f"{prefix}-")
    if for_update:
        qs = qs.select_for_update()

    last_code = (
        qs.order_by(Length("code").desc(), "-code")
        .values_list("code", flat=True)
        .first()
    )

    sequence = parse_code_sequence(last_code) + 1 if last_code else 1
    return f"{prefix}-{sequence:0{SEQUENCE_WIDTH}d}"


# ------------------------------------------------------------
# POSTING
# ------------------------------------------------------------


def _code_taken(code: str | None, *, using: str | None) -> bool:
    if not code:
        return False
    with transaction.atomic(using=using):
        return (
            Journal.objects.using(using)
            .select_for_update()
            .filter(code=code)
            .exists()
        )


def _insert_journal(
    *,
    code: str,
    store_uuid: str,
    user_id: str,
    rows,
    now,
    using: str | None,
) -> tuple[Journal, list[JournalDetail]]:
    journal = Journal(
        uuid=generate_journal_uuid(store_uuid),
        code=code,
        created_by=user_id,
        verified_by=user_id,
        verified_at=now,
        created_at=now,
    )
    journal.save(using=using, force_insert=True)

    details = [
        JournalDetail(
            uuid=generate_journal_detail_uuid(store_uuid),
            journal=journal,
            key=row.key,
            value=row.value,
            position=position,
            created_by=user_id,
        )
        for position, row in enumerate(rows)
    ]
    if details:
        JournalDetail.objects.using(using).bulk_create(details)

    return journal, details


def create_journal(
    *,
    transaction_type: str,
    details: Mapping | None,
    user_id: str,
    store_uuid: str,
    using: str | None = None,
) -> JournalPostingResult:
    """
    Record one transaction: a pre-verified header plus one row per captured field.

    details:
    - top-level keys become rows as-is
    - details["items"] (list of objects) expands to "<field>#<index>" rows
    - None values are never stored
    """
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required to create a journal")

    transaction_type = normalize_transaction_type(transaction_type)
    user_id = str(user_id or "")

    rows = flatten_details(details, max_length=_value_max_length())

    attempts = _max_retries()
    for attempt in range(1, attempts + 1):
        code = None
        try:
            with transaction.atomic(using=using):
                now = timezone.now()
                code = generate_code(
                    transaction_type,
                    store_uuid,
                    day=timezone.localdate(now),
                    using=using,
                    for_update=True,
                )
                journal, detail_rows = _insert_journal(
                    code=code,
                    store_uuid=store_uuid,
                    user_id=user_id,
                    rows=rows,
                    now=now,
                    using=using,
                )
        except IntegrityError as exc:
            # only a duplicate journal.code is retried; anything else propagates
            if not _code_taken(code, using=using):
                raise
            if attempt >= attempts:
                raise JournalCodeConflictError(
                    f"Could not allocate a unique {transaction_type} journal code "
                    f"for store {store_uuid} after {attempts} attempts"
                ) from exc
            logger.warning(
                "Journal code conflict, retrying",
                extra={
                    "transaction_type": transaction_type,
                    "store_uuid": store_uuid,
                    "attempt": attempt,
                },
            )
            continue

        logger.info(
            "Journal created",
            extra={"code": journal.code, "detail_count": len(detail_rows)},
        )
        return JournalPostingResult(
            message=f"{transaction_type} journal created",
            journal=journal,
            details=detail_rows,
        )

    # unreachable: the loop either returns or raises
    raise JournalCodeConflictError("Journal code allocation failed")


def process_stock_adjustment(
    *,
    adjustments: Iterable,
    user_id: str,
    store_uuid: str,
    using: str | None = None,
) -> JournalPostingResult | None:
    """
    Journal the net quantity change of each (product, unit).

    - diff = new_qty - old_qty; zero diffs are skipped
    - diff > 0 -> stok_qty_plus = diff
    - diff < 0 -> stok_qty_min  = |diff|
    - returns None when nothing changed (no empty journal is written)

    Runs inside the caller's transaction when one is open.
    """
    items = []
    for raw in adjustments or []:
        adjustment = StockAdjustment.coerce(raw)
        diff = adjustment.new_qty - adjustment.old_qty
        if diff == 0:
            continue

        item = {
            "stok_product_uuid": adjustment.product_uuid,
            "stok_unit_uuid": adjustment.unit_uuid,
        }
        if diff > 0:
            item["stok_qty_plus"] = _plain_number(diff)
        else:
            item["stok_qty_min"] = _plain_number(abs(diff))
        items.append(item)

    if not items:
        return None

    return create_journal(
        transaction_type=STOCK_ADJUSTMENT,
        details={ITEMS_KEY: items},
        user_id=user_id,
        store_uuid=store_uuid,
        using=using,
    )


def post_side_journal(
    *,
    transaction_type: str,
    details: Mapping | None,
    user_id: str,
    store_uuid: str,
    using: str | None = None,
) -> JournalPostingResult | None:
    """
    Advisory journal for secondary events (table booked / occupied / cleared).

    The primary operation must win: any failure here is logged and swallowed.
    Our writes are a savepoint, so the caller's transaction stays usable.
    """
    try:
        return create_journal(
            transaction_type=transaction_type,
            details=details,
            user_id=user_id,
            store_uuid=store_uuid,
            using=using,
        )
    except Exception:
        logger.exception(
            "Side journal failed; primary operation continues",
            extra={"transaction_type": transaction_type, "store_uuid": store_uuid},
        )
        return None


# ------------------------------------------------------------
# QUERIES
# ------------------------------------------------------------


def find_all_by_type(*, type_prefix: str | None, store_uuid: str):
    """
    Journals of one store (optionally one transaction type), newest first,
    details prefetched.
    """
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required")

    qs = Journal.objects.all()
    type_prefix = (type_prefix or "").strip()
    if type_prefix:
        qs = qs.filter(code__startswith=f"{type_prefix}-{store_uuid}-")
    else:
        qs = qs.filter(code__contains=store_code_fragment(store_uuid))

    return qs.prefetch_related("details").order_by("-created_at", "-code")


def get_journal(*, code: str, store_uuid: str) -> Journal:
    code = (code or "").strip()
    if not code or store_code_fragment(store_uuid) not in code:
        raise LedgerNotFoundError(f"Journal {code!r} not found")
    try:
        return Journal.objects.prefetch_related("details").get(code=code)
    except Journal.DoesNotExist as exc:
        raise LedgerNotFoundError(f"Journal {code!r} not found") from exc


@transaction.atomic
def verify_journal(*, code: str, user_id: str, store_uuid: str) -> Journal:
    """
    Idempotent: the first verification wins, later calls change nothing.
    """
    journal = get_journal(code=code, store_uuid=store_uuid)
    journal = Journal.objects.select_for_update().get(pk=journal.pk)

    if journal.verified_at is not None:
        return journal

    journal.verified_by = str(user_id or "")
    journal.verified_at = timezone.now()
    journal.save(update_fields=["verified_by", "verified_at"])
    return journal
