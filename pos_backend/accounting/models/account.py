# accounting/models/account.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from store.models import Store


class Account(models.Model):
    """
    Represents a single account within a store's chart of accounts.

    Guarantees:
    - Account codes are unique per store
    - Code + name are normalized (trimmed)
    - parent (if any) belongs to the same store and is never the account itself
    - a child's category equals its parent's category (kept in sync by
      account_service, not by a database constraint)
    """

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    CATEGORY_CHOICES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (REVENUE, "Revenue"),
        (EXPENSE, "Expense"),
    ]

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    NORMAL_BALANCE_CHOICES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    uuid = models.CharField(primary_key=True, max_length=120, editable=False)

    store = models.ForeignKey(
        Store,
        on_delete=models.CASCADE,
        related_name="accounts",
        db_column="store_uuid",
    )

    code = models.CharField(max_length=20)
    name = models.CharField(max_length=100)

    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)

    normal_balance = models.CharField(max_length=10, choices=NORMAL_BALANCE_CHOICES)

    is_system = models.BooleanField(
        default=False,
        help_text="Seeded at store installation; system accounts cannot be deleted",
    )

    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
        db_column="parent_uuid",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "account"
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["store", "code"], name="account_store_code_idx"),
            models.Index(fields=["store", "category"], name="account_store_cat_idx"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["store", "code"],
                name="uniq_account_store_code",
            ),
            models.CheckConstraint(
                condition=~Q(code=""),
                name="chk_account_code_not_blank",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.code:
            raise ValidationError("Account code is required")
        if not self.name:
            raise ValidationError("Account name is required")

        if self.parent_id:
            if self.parent_id == self.pk:
                raise ValidationError("An account cannot be its own parent")
            if self.parent.store_id != self.store_id:
                raise ValidationError("Parent account must belong to the same store")

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
