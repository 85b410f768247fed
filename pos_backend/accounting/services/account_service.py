# accounting/services/account_service.py

"""
======================================================
PATH: accounting/services/account_service.py
======================================================
ACCOUNT SERVICE (STORE CHART OF ACCOUNTS)

Responsibilities:
- Seed the standard (system) accounts of a store
- Create / update / delete accounts
- Keep the category tree consistent

Category tree rules:
- a child always carries its parent's category
- re-parenting forces the parent's category onto the account
- a category change cascades through the whole subtree
- parent links never form a cycle (checked before save)
"""

from __future__ import annotations

import logging

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from accounting.models.account import Account
from accounting.services.exceptions import LedgerNotFoundError, LedgerValidationError
from store.identifiers import generate_account_uuid
from store.models import Store

logger = logging.getLogger(__name__)


CATEGORY_NORMAL_BALANCE = {
    Account.ASSET: Account.DEBIT,
    Account.LIABILITY: Account.CREDIT,
    Account.EQUITY: Account.CREDIT,
    Account.REVENUE: Account.CREDIT,
    Account.EXPENSE: Account.DEBIT,
}

# (code, name, category)
STANDARD_ACCOUNTS = [
    ("1-1001", "Cash", Account.ASSET),
    ("1-1002", "Bank", Account.ASSET),
    ("1-2001", "Accounts Receivable", Account.ASSET),
    ("2-1001", "Accounts Payable", Account.LIABILITY),
    ("3-1001", "Owner's Equity", Account.EQUITY),
    ("4-1001", "Sales Revenue", Account.REVENUE),
    ("4-2001", "Other Revenue", Account.REVENUE),
    ("6-1001", "Stock Purchase Expense", Account.EXPENSE),
    ("6-2001", "Operating Expense", Account.EXPENSE),
    ("6-2002", "Salary Expense", Account.EXPENSE),
]

UPDATABLE_FIELDS = ("code", "name", "category", "normal_balance", "parent_uuid")

_UNSET = object()


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(exc.messages) if exc.messages else str(exc)


def _get_store(store_uuid: str) -> Store:
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required")
    try:
        return Store.objects.get(uuid=store_uuid)
    except Store.DoesNotExist as exc:
        raise LedgerNotFoundError(f"Store {store_uuid!r} not found") from exc


def _normalize_category(category) -> str:
    value = (category or "").strip().upper()
    if value not in CATEGORY_NORMAL_BALANCE:
        raise LedgerValidationError(f"Invalid account category: {category!r}")
    return value


def _normalize_normal_balance(normal_balance) -> str:
    value = (normal_balance or "").strip().upper()
    if value not in (Account.DEBIT, Account.CREDIT):
        raise LedgerValidationError(f"Invalid normal balance: {normal_balance!r}")
    return value


def get_account_categories() -> list[dict]:
    return [
        {
            "value": value,
            "label": label,
            "normal_balance": CATEGORY_NORMAL_BALANCE[value],
        }
        for value, label in Account.CATEGORY_CHOICES
    ]


@transaction.atomic
def initialize_standard_accounts(*, store_uuid: str) -> list[Account]:
    """
    Idempotent: codes that already exist in the store are left untouched.
    Returns the accounts created by this call.
    """
    store = _get_store(store_uuid)

    existing = set(
        Account.objects.filter(store=store).values_list("code", flat=True)
    )

    created = []
    for code, name, category in STANDARD_ACCOUNTS:
        if code in existing:
            continue
        created.append(
            Account.objects.create(
                uuid=generate_account_uuid(store.uuid, code),
                store=store,
                code=code,
                name=name,
                category=category,
                normal_balance=CATEGORY_NORMAL_BALANCE[category],
                is_system=True,
            )
        )

    logger.info(
        "Standard accounts initialized",
        extra={"store_uuid": store.uuid, "accounts_created": len(created)},
    )
    return created


def list_accounts(*, store_uuid: str):
    store_uuid = (store_uuid or "").strip()
    if not store_uuid:
        raise LedgerValidationError("Store is required")
    return Account.objects.filter(store_id=store_uuid).select_related("parent").order_by("code")


def get_account(*, store_uuid: str, uuid: str) -> Account:
    try:
        return Account.objects.select_related("parent").get(store_id=store_uuid, uuid=uuid)
    except Account.DoesNotExist as exc:
        raise LedgerNotFoundError(f"Account {uuid!r} not found") from exc


def _get_parent(*, store_uuid: str, parent_uuid: str) -> Account:
    try:
        return Account.objects.get(store_id=store_uuid, uuid=parent_uuid)
    except Account.DoesNotExist as exc:
        raise LedgerNotFoundError(f"Parent account {parent_uuid!r} not found") from exc


def _ensure_code_available(*, store_uuid: str, code: str, exclude_uuid: str | None = None):
    qs = Account.objects.filter(store_id=store_uuid, code=code)
    if exclude_uuid:
        qs = qs.exclude(uuid=exclude_uuid)
    if qs.exists():
        raise LedgerValidationError(f"Account code {code!r} already exists in this store")


def _ensure_no_cycle(*, account_uuid: str, parent: Account):
    """
    Walk up from the proposed parent; reaching the account itself means the
    new link would close a loop.
    """
    seen = set()
    node = parent
    while node is not None:
        if node.uuid == account_uuid:
            raise LedgerValidationError("Account parent would create a cycle")
        if node.uuid in seen:
            raise LedgerValidationError("Account tree already contains a cycle")
        seen.add(node.uuid)
        node = node.parent


def _save(account: Account):
    try:
        account.save()
    except ValidationError as exc:
        raise LedgerValidationError(_validation_message(exc)) from exc
    except IntegrityError as exc:
        raise LedgerValidationError(
            f"Account code {account.code!r} already exists in this store"
        ) from exc


@transaction.atomic
def create_account(
    *,
    store_uuid: str,
    code: str,
    name: str,
    category: str,
    normal_balance: str | None = None,
    parent_uuid: str | None = None,
    is_system: bool = False,
) -> Account:
    store = _get_store(store_uuid)

    code = (code or "").strip()
    if not code:
        raise LedgerValidationError("Account code is required")

    category = _normalize_category(category)

    parent = None
    if parent_uuid:
        parent = _get_parent(store_uuid=store.uuid, parent_uuid=parent_uuid)
        category = parent.category

    if normal_balance:
        normal_balance = _normalize_normal_balance(normal_balance)
    else:
        normal_balance = CATEGORY_NORMAL_BALANCE[category]

    _ensure_code_available(store_uuid=store.uuid, code=code)

    account = Account(
        uuid=generate_account_uuid(store.uuid, code),
        store=store,
        code=code,
        name=name,
        category=category,
        normal_balance=normal_balance,
        parent=parent,
        is_system=is_system,
    )
    # savepoint: a unique violation must not poison the outer transaction
    with transaction.atomic():
        _save(account)

    logger.info(
        "Account created",
        extra={"store_uuid": store.uuid, "account_uuid": account.uuid, "code": account.code},
    )
    return account


def _propagate_category(account: Account, category: str, seen: set) -> int:
    children = list(Account.objects.filter(parent_id=account.uuid))
    if not children:
        return 0

    Account.objects.filter(parent_id=account.uuid).update(
        category=category, updated_at=timezone.now()
    )

    touched = len(children)
    for child in children:
        if child.uuid in seen:
            continue
        seen.add(child.uuid)
        touched += _propagate_category(child, category, seen)
    return touched


@transaction.atomic
def update_account(*, store_uuid: str, uuid: str, patch: dict) -> Account:
    """
    Partial update.

    patch keys: code, name, category, normal_balance, parent_uuid
    (parent_uuid=None detaches the account from its parent).
    """
    account = get_account(store_uuid=store_uuid, uuid=uuid)
    previous_category = account.category

    unknown = set(patch) - set(UPDATABLE_FIELDS)
    if unknown:
        raise LedgerValidationError(f"Unknown account fields: {', '.join(sorted(unknown))}")

    if "code" in patch:
        code = (patch["code"] or "").strip()
        if not code:
            raise LedgerValidationError("Account code is required")
        _ensure_code_available(store_uuid=store_uuid, code=code, exclude_uuid=account.uuid)
        account.code = code

    if "name" in patch:
        account.name = patch["name"]

    if "category" in patch:
        account.category = _normalize_category(patch["category"])

    if "normal_balance" in patch:
        account.normal_balance = _normalize_normal_balance(patch["normal_balance"])

    parent_uuid = patch.get("parent_uuid", _UNSET)
    if parent_uuid is not _UNSET:
        if parent_uuid:
            if parent_uuid == account.uuid:
                raise LedgerValidationError("An account cannot be its own parent")
            parent = _get_parent(store_uuid=store_uuid, parent_uuid=parent_uuid)
            _ensure_no_cycle(account_uuid=account.uuid, parent=parent)
            account.parent = parent
        else:
            account.parent = None

    # a child never holds a category different from its parent
    if account.parent_id:
        account.category = account.parent.category

    with transaction.atomic():
        _save(account)

    if account.category != previous_category:
        touched = _propagate_category(account, account.category, {account.uuid})
        logger.info(
            "Account category propagated",
            extra={
                "account_uuid": account.uuid,
                "category": account.category,
                "children_updated": touched,
            },
        )

    return account


@transaction.atomic
def delete_account(*, store_uuid: str, uuid: str) -> None:
    account = get_account(store_uuid=store_uuid, uuid=uuid)

    if account.is_system:
        raise LedgerValidationError("System accounts cannot be deleted")

    if Account.objects.filter(parent_id=account.uuid).exists():
        raise LedgerValidationError("Account has child accounts; move or delete them first")

    if account.journal_configs.exists():
        raise LedgerValidationError("Account is used by journal configs; remove them first")

    account.delete()
    logger.info(
        "Account deleted",
        extra={"store_uuid": store_uuid, "account_uuid": uuid},
    )
