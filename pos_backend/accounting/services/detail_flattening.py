# accounting/services/detail_flattening.py

"""
======================================================
PATH: accounting/services/detail_flattening.py
======================================================
DETAIL FLATTENING

Turns a journal payload into ordered (key, value) rows.

Payload shape (closed set of value kinds):
- scalar        -> one row, value as text
- mapping/list  -> one row, value JSON-encoded
- "items"       -> list of mappings; every field of item N becomes a row
                   keyed "<snake_case_field>#N"

Skipped:
- None anywhere
- "" inside items

Every value is cut to max_length characters (lossy for long JSON blobs).
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from accounting.services.exceptions import LedgerValidationError

ITEMS_KEY = "items"
ITEM_INDEX_SEPARATOR = "#"

DEFAULT_VALUE_MAX_LENGTH = 500
KEY_MAX_LENGTH = 255

_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s\-]+")


@dataclass(frozen=True)
class DetailRow:
    key: str
    value: str


def to_snake_case(name: str) -> str:
    text = str(name).strip()
    text = _ACRONYM_BOUNDARY.sub(r"\1_\2", text)
    text = _CAMEL_BOUNDARY.sub(r"\1_\2", text)
    text = _SEPARATORS.sub("_", text)
    return text.lower()


def _encode_number(value) -> str:
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def encode_value(value) -> str | None:
    """
    Text form of a single detail value, or None when the value is skipped.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _encode_number(value)
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, str):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (Mapping, list, tuple)):
        return json.dumps(
            value, default=str, ensure_ascii=False, separators=(",", ":")
        )
    return str(value)


def _truncate(text: str, limit: int) -> str:
    return text[:limit] if len(text) > limit else text


def _expand_items(items, *, max_length: int) -> list[DetailRow]:
    if not isinstance(items, (list, tuple)):
        raise LedgerValidationError("details.items must be a list of objects")

    rows: list[DetailRow] = []
    for index, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise LedgerValidationError(
                f"details.items[{index}] must be an object, got {type(item).__name__}"
            )

        for field, raw in item.items():
            if raw is None or raw == "":
                continue
            encoded = encode_value(raw)
            if encoded is None:
                continue
            # the index suffix always survives truncation
            suffix = f"{ITEM_INDEX_SEPARATOR}{index}"
            name = _truncate(to_snake_case(field), KEY_MAX_LENGTH - len(suffix))
            rows.append(
                DetailRow(
                    key=f"{name}{suffix}",
                    value=_truncate(encoded, max_length),
                )
            )
    return rows


def flatten_details(
    details: Mapping | None, *, max_length: int = DEFAULT_VALUE_MAX_LENGTH
) -> list[DetailRow]:
    if details is None:
        return []
    if not isinstance(details, Mapping):
        raise LedgerValidationError("details must be an object")

    rows: list[DetailRow] = []
    for key, raw in details.items():
        if raw is None:
            continue

        if key == ITEMS_KEY:
            rows.extend(_expand_items(raw, max_length=max_length))
            continue

        encoded = encode_value(raw)
        if encoded is None:
            continue
        rows.append(
            DetailRow(
                key=_truncate(str(key), KEY_MAX_LENGTH),
                value=_truncate(encoded, max_length),
            )
        )
    return rows
