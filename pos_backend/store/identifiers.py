# store/identifiers.py

"""
PATH: store/identifiers.py

HUMAN-READABLE IDENTIFIERS

Every store-owned row carries a string primary key that embeds the store
identifier, e.g.:
- store:          STR-k3j9x0alq2vz8
- account:        STR-k3j9x0alq2vz8-ACC-p0o9i8ulq2w11-1-1001
- journal config: STR-k3j9x0alq2vz8-CFG-p0o9i8ulq2w11

The local part is 7 random base36 characters followed by the current
millisecond timestamp in base36, so ids created later sort later.
"""

from __future__ import annotations

import secrets
import time

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(_ALPHABET[rem])
    return "".join(reversed(out))


def generate_local_uuid() -> str:
    random_part = "".join(secrets.choice(_ALPHABET) for _ in range(7))
    return random_part + _base36(int(time.time() * 1000))


def generate_store_uuid() -> str:
    return f"STR-{generate_local_uuid()}"


def generate_account_uuid(store_uuid: str, code: str) -> str:
    return f"{store_uuid}-ACC-{generate_local_uuid()}-{code}"


def generate_journal_config_uuid(store_uuid: str) -> str:
    return f"{store_uuid}-CFG-{generate_local_uuid()}"


def generate_journal_uuid(store_uuid: str) -> str:
    return f"{store_uuid}-JRN-{generate_local_uuid()}"


def generate_journal_detail_uuid(store_uuid: str) -> str:
    return f"{store_uuid}-JDT-{generate_local_uuid()}"
