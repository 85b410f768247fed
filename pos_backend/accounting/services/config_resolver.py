# accounting/services/config_resolver.py

"""
======================================================
PATH: accounting/services/config_resolver.py
======================================================
POSTING RULE RESOLVER

Answers ONE question:
"Which posting rules apply to this (transaction type, detail key)?"

Priority:
1. Exact: every rule of the type whose detail_key equals the key.
2. Prefix: among PREFIX rules of the type whose detail_key is a prefix of
   the key, the ones with the LONGEST prefix ("SALE_A_" beats "SALE_").
3. Nothing: empty list (the detail contributes to no account).

Several rules can come back from either step: that is a split posting.

Pure: no queries, no mutation. Rules are any objects exposing
transaction_type, detail_key and is_prefix (JournalConfig rows or
PostingRule snapshots).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class PostingRule:
    transaction_type: str
    detail_key: str
    position: str
    account_uuid: str
    is_prefix: bool = False
    uuid: str = ""

    @classmethod
    def from_config(cls, config) -> "PostingRule":
        return cls(
            transaction_type=config.transaction_type,
            detail_key=config.detail_key,
            position=config.position,
            account_uuid=config.account_id,
            is_prefix=config.is_prefix,
            uuid=config.uuid,
        )


def resolve(configs: Iterable, transaction_type: str, detail_key: str) -> list:
    candidates = [c for c in configs if c.transaction_type == transaction_type]
    if not candidates:
        return []

    exact = [c for c in candidates if c.detail_key == detail_key]
    if exact:
        return exact

    prefixed = [
        c
        for c in candidates
        if c.is_prefix and c.detail_key and detail_key.startswith(c.detail_key)
    ]
    if not prefixed:
        return []

    longest = max(len(c.detail_key) for c in prefixed)
    return [c for c in prefixed if len(c.detail_key) == longest]


class PostingRuleIndex:
    """
    Memoized resolver over one snapshot of rules.

    Reports resolve the same (type, key) pairs thousands of times; the
    snapshot is grouped by type once and each pair is resolved once.
    """

    def __init__(self, configs: Iterable):
        self._by_type: dict[str, list] = {}
        for config in configs:
            self._by_type.setdefault(config.transaction_type, []).append(config)
        self._cache: dict[tuple[str, str], Sequence] = {}

    def __len__(self) -> int:
        return sum(len(v) for v in self._by_type.values())

    def resolve(self, transaction_type: str, detail_key: str) -> Sequence:
        cache_key = (transaction_type, detail_key)
        hit = self._cache.get(cache_key)
        if hit is None:
            hit = tuple(
                resolve(
                    self._by_type.get(transaction_type, ()),
                    transaction_type,
                    detail_key,
                )
            )
            self._cache[cache_key] = hit
        return hit
