# store/models/store.py

from django.db import models
from django.db.models import Q

from store.identifiers import generate_store_uuid


class Store(models.Model):
    """
    Represents a physical store / branch (the ledger tenant).

    Guarantees:
    - uuid is a human-readable string (STR-...) and never contains spaces;
      it is embedded verbatim into journal codes
    - code is optional, but if provided it must be unique
    """

    uuid = models.CharField(
        primary_key=True,
        max_length=60,
        default=generate_store_uuid,
        editable=False,
    )

    name = models.CharField(max_length=255)

    code = models.CharField(
        max_length=50,
        null=True,
        blank=True,
        help_text="Unique store/branch code (optional). If set, must be unique.",
        db_index=True,
    )

    address = models.TextField(blank=True)
    phone = models.CharField(max_length=50, blank=True)

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "store"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["code"],
                condition=Q(code__isnull=False) & ~Q(code=""),
                name="uniq_store_code_when_present",
            ),
        ]

    def __str__(self):
        c = (self.code or "").strip()
        if c:
            return f"{self.name} ({c})"
        return self.name
