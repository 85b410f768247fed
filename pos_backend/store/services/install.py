# store/services/install.py

"""
PATH: store/services/install.py

STORE INSTALLATION

Installing a store:
- creates the Store row
- seeds the standard (system) chart of accounts for it

Both happen in one transaction: a store never exists without its
system accounts.
"""

from __future__ import annotations

import logging

from django.db import transaction

from accounting.services.account_service import initialize_standard_accounts
from store.models import Store

logger = logging.getLogger(__name__)


@transaction.atomic
def install_store(
    *,
    name: str,
    code: str | None = None,
    address: str = "",
    phone: str = "",
) -> Store:
    name = (name or "").strip()
    if not name:
        raise ValueError("Store name is required")

    code = (code or "").strip() or None
    if code and Store.objects.filter(code=code).exists():
        raise ValueError(f"Store code {code!r} is already in use")

    store = Store.objects.create(
        name=name,
        code=code,
        address=address or "",
        phone=phone or "",
    )

    accounts = initialize_standard_accounts(store_uuid=store.uuid)

    logger.info(
        "Store installed",
        extra={"store_uuid": store.uuid, "accounts_seeded": len(accounts)},
    )
    return store
