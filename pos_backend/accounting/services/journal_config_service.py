# accounting/services/journal_config_service.py

"""
======================================================
PATH: accounting/services/journal_config_service.py
======================================================
JOURNAL CONFIG SERVICE (POSTING RULES)

- list:      active rules of a store
- replace:   the rule set of one (store, type, key) is replaced as a whole;
             previous rules are soft-deleted, one rule per item is inserted
- remove:    soft delete of one rule
- discovery: detail keys actually used by the store's journals, with the
             rules they currently resolve to
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from accounting.models.account import Account
from accounting.models.journal import JournalDetail
from accounting.models.journal_config import JournalConfig
from accounting.services.config_resolver import resolve
from accounting.services.exceptions import LedgerNotFoundError, LedgerValidationError
from accounting.services.journal_service import (
    normalize_transaction_type,
    store_code_fragment,
    transaction_type_from_code,
)
from accounting.services.report_service import parse_amount
from store.identifiers import generate_journal_config_uuid
from store.models import Store

logger = logging.getLogger(__name__)


def _require_store(store_uuid: str) -> Store:
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required")
    try:
        return Store.objects.get(uuid=store_uuid)
    except Store.DoesNotExist as exc:
        raise LedgerNotFoundError(f"Store {store_uuid!r} not found") from exc


def _normalize_match_mode(match_mode, detail_key: str) -> str:
    value = (match_mode or "").strip().upper()
    if not value:
        return JournalConfig.infer_match_mode(detail_key)
    if value not in (JournalConfig.EXACT, JournalConfig.PREFIX):
        raise LedgerValidationError(f"Invalid match mode: {match_mode!r}")
    return value


def _normalize_position(position) -> str:
    value = (position or "").strip().upper()
    if value not in (JournalConfig.DEBIT, JournalConfig.CREDIT):
        raise LedgerValidationError(f"Invalid position: {position!r}")
    return value


def list_configs(*, store_uuid: str, transaction_type: str | None = None):
    qs = JournalConfig.objects.filter(store_id=store_uuid).select_related("account")
    if transaction_type:
        qs = qs.filter(transaction_type=transaction_type)
    return qs.order_by("transaction_type", "detail_key", "position")


@transaction.atomic
def replace_configs(
    *,
    store_uuid: str,
    transaction_type: str,
    detail_key: str,
    items: list,
    user_id: str,
    match_mode: str | None = None,
) -> list[JournalConfig]:
    """
    items: [{"position": "DEBIT"|"CREDIT", "account_uuid": "..."}]

    An empty items list just clears the rules of the pair.
    """
    store = _require_store(store_uuid)
    transaction_type = normalize_transaction_type(transaction_type)

    detail_key = (detail_key or "").strip()
    if not detail_key:
        raise LedgerValidationError("Detail key is required")

    match_mode = _normalize_match_mode(match_mode, detail_key)

    rules = []
    for item in items or []:
        if not isinstance(item, Mapping):
            raise LedgerValidationError("Each config item must be an object")
        position = _normalize_position(item.get("position"))
        account_uuid = (item.get("account_uuid") or "").strip()
        try:
            account = Account.objects.get(store=store, uuid=account_uuid)
        except Account.DoesNotExist as exc:
            raise LedgerNotFoundError(f"Account {account_uuid!r} not found") from exc
        rules.append((position, account))

    now = timezone.now()
    user_id = str(user_id or "")

    replaced = JournalConfig.objects.filter(
        store=store,
        transaction_type=transaction_type,
        detail_key=detail_key,
    ).update(deleted_at=now, deleted_by=user_id, updated_by=user_id, updated_at=now)

    created = [
        JournalConfig.objects.create(
            uuid=generate_journal_config_uuid(store.uuid),
            store=store,
            transaction_type=transaction_type,
            detail_key=detail_key,
            match_mode=match_mode,
            position=position,
            account=account,
            created_by=user_id,
        )
        for position, account in rules
    ]

    logger.info(
        "Journal configs replaced",
        extra={
            "store_uuid": store.uuid,
            "transaction_type": transaction_type,
            "detail_key": detail_key,
            "replaced": replaced,
            "rules_created": len(created),
        },
    )
    return created


@transaction.atomic
def remove_config(*, store_uuid: str, uuid: str, user_id: str) -> JournalConfig:
    try:
        config = JournalConfig.objects.select_for_update().get(store_id=store_uuid, uuid=uuid)
    except JournalConfig.DoesNotExist as exc:
        raise LedgerNotFoundError(f"Journal config {uuid!r} not found") from exc

    config.deleted_at = timezone.now()
    config.deleted_by = str(user_id or "")
    config.save(update_fields=["deleted_at", "deleted_by", "updated_at"])
    return config


def get_discovery(*, store_uuid: str, prefix: str | None = None) -> list[dict]:
    """
    One row per (transaction type, detail key) seen in the store's journals:
    frequency, total numeric value, and the rules that would post it.
    """
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required")

    details = JournalDetail.objects.filter(
        journal__code__contains=store_code_fragment(store_uuid)
    )
    prefix = (prefix or "").strip()
    if prefix:
        details = details.filter(key__startswith=prefix)

    groups: dict[tuple[str, str], dict] = {}
    for journal_code, key, value in details.values_list("journal_id", "key", "value").iterator():
        group_key = (transaction_type_from_code(journal_code), key)
        group = groups.get(group_key)
        if group is None:
            group = groups[group_key] = {"frequency": 0, "total": Decimal("0")}
        group["frequency"] += 1
        group["total"] += parse_amount(value)

    configs = list(list_configs(store_uuid=store_uuid))

    rows = []
    for (transaction_type, detail_key), group in sorted(groups.items()):
        matches = resolve(configs, transaction_type, detail_key)
        rows.append(
            {
                "transaction_type": transaction_type,
                "detail_key": detail_key,
                "frequency": group["frequency"],
                "total_value": float(group["total"]),
                "is_mapped": bool(matches),
                "is_wildcard": any(m.detail_key != detail_key for m in matches),
                "configs": [
                    {
                        "uuid": m.uuid,
                        "account_uuid": m.account_id,
                        "account_code": m.account.code,
                        "account_name": m.account.name,
                        "position": m.position,
                        "detail_key_source": m.detail_key,
                    }
                    for m in matches
                ],
            }
        )
    return rows
