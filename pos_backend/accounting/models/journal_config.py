# accounting/models/journal_config.py

"""
======================================================
PATH: accounting/models/journal_config.py
======================================================
JOURNAL CONFIG (POSTING RULE)

Maps (transaction_type, detail_key) -> (account, DEBIT|CREDIT).

match_mode:
- EXACT:  detail_key must equal the journal detail key
- PREFIX: detail_key is a prefix; "stok_min_" matches "stok_min_qty#0"

Legacy rules were written as "prefix ends with underscore"; when match_mode
is not given it is inferred from that convention.

Several rules may share (transaction_type, detail_key): the value is then
posted to every one of their accounts (split posting).

Soft-deletable: deleted rows keep deleted_at/deleted_by and are hidden by
the default manager.
"""

from __future__ import annotations

from django.db import models

from accounting.models.account import Account
from store.models import Store


class ActiveJournalConfigManager(models.Manager):
    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class JournalConfig(models.Model):
    WILDCARD_MARKER = "_"

    EXACT = "EXACT"
    PREFIX = "PREFIX"

    MATCH_MODE_CHOICES = [
        (EXACT, "Exact key"),
        (PREFIX, "Key prefix"),
    ]

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    POSITION_CHOICES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    uuid = models.CharField(primary_key=True, max_length=120, editable=False)

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="journal_configs",
        db_column="store_uuid",
    )

    transaction_type = models.CharField(max_length=50)
    detail_key = models.CharField(max_length=100)

    match_mode = models.CharField(
        max_length=10,
        choices=MATCH_MODE_CHOICES,
        blank=True,
        default="",
    )

    position = models.CharField(max_length=10, choices=POSITION_CHOICES)

    account = models.ForeignKey(
        Account,
        on_delete=models.CASCADE,
        related_name="journal_configs",
        db_column="account_uuid",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_at = models.DateTimeField(blank=True, null=True)

    created_by = models.CharField(max_length=60, blank=True, null=True)
    updated_by = models.CharField(max_length=60, blank=True, null=True)
    deleted_by = models.CharField(max_length=60, blank=True, null=True)

    objects = ActiveJournalConfigManager()
    all_objects = models.Manager()

    class Meta:
        db_table = "journal_config"
        ordering = ["transaction_type", "detail_key", "position"]
        indexes = [
            models.Index(
                fields=["store", "transaction_type", "detail_key"],
                name="journal_config_lookup_idx",
            ),
        ]

    def __str__(self):
        marker = "*" if self.is_prefix else ""
        return f"{self.transaction_type}:{self.detail_key}{marker} -> {self.position} {self.account_id}"

    @classmethod
    def infer_match_mode(cls, detail_key: str) -> str:
        if (detail_key or "").endswith(cls.WILDCARD_MARKER):
            return cls.PREFIX
        return cls.EXACT

    @property
    def is_prefix(self) -> bool:
        mode = self.match_mode or self.infer_match_mode(self.detail_key)
        return mode == self.PREFIX

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def save(self, *args, **kwargs):
        if not self.match_mode:
            self.match_mode = self.infer_match_mode(self.detail_key)
        return super().save(*args, **kwargs)
