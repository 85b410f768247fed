# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL + JOURNAL DETAIL MODELS

A Journal is one recorded business transaction (header). Its facts are
stored as ordered (key, value) JournalDetail rows instead of typed columns,
so any caller (sale, purchase, stock adjustment, table events) can post
without a schema change.

Journal.code format:  {TYPE}-{storeUuid}-{YYYYMMDD}-{seq:04d}
- sortable as a string inside a (type, store, day) bucket
- the store scope of a journal is the "-{storeUuid}-" substring of its code
- the transaction type is everything before the first hyphen
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone


class Journal(models.Model):
    uuid = models.CharField(primary_key=True, max_length=120, editable=False)

    code = models.CharField(
        max_length=150,
        unique=True,
        help_text="{TYPE}-{storeUuid}-{YYYYMMDD}-{seq:04d}",
    )

    created_by = models.CharField(max_length=60, blank=True, default="")

    verified_by = models.CharField(max_length=60, blank=True, null=True)
    verified_at = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = "journal"
        ordering = ["-created_at", "-code"]
        verbose_name = "Journal"
        verbose_name_plural = "Journals"

    def __str__(self):
        return self.code

    @property
    def transaction_type(self) -> str:
        return (self.code or "").split("-", 1)[0]

    @property
    def sequence(self) -> int:
        tail = (self.code or "").rsplit("-", 1)[-1]
        try:
            return int(tail)
        except ValueError:
            return 0

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None


class JournalDetail(models.Model):
    """
    One flattened fact of a journal.

    - key:   header field name, or "<snake_case_field>#<index>" for items
    - value: text; numbers as plain digits, objects/arrays JSON-encoded
    - position keeps the order the details were captured in
    """

    uuid = models.CharField(primary_key=True, max_length=120, editable=False)

    journal = models.ForeignKey(
        Journal,
        to_field="code",
        db_column="journal_code",
        on_delete=models.CASCADE,
        related_name="details",
    )

    key = models.CharField(max_length=255)
    value = models.TextField(blank=True, default="")

    position = models.PositiveIntegerField(default=0)

    created_by = models.CharField(max_length=60, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "journal_detail"
        ordering = ["journal_id", "position"]
        indexes = [
            models.Index(fields=["key"], name="journal_detail_key_idx"),
        ]

    def __str__(self):
        return f"{self.journal_id} {self.key}={self.value}"
