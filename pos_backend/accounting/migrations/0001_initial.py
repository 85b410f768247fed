"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: CREATE Account, Journal, JournalDetail, JournalConfig

- account:        store-scoped chart of accounts (self-referential tree)
- journal:        transaction header, unique human-readable code
- journal_detail: flattened (key, value) facts, FK to journal.code
- journal_config: soft-deletable posting rules
"""

from __future__ import annotations

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("store", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                (
                    "uuid",
                    models.CharField(
                        editable=False,
                        max_length=120,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("code", models.CharField(max_length=20)),
                ("name", models.CharField(max_length=100)),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("ASSET", "Asset"),
                            ("LIABILITY", "Liability"),
                            ("EQUITY", "Equity"),
                            ("REVENUE", "Revenue"),
                            ("EXPENSE", "Expense"),
                        ],
                        max_length=20,
                    ),
                ),
                (
                    "normal_balance",
                    models.CharField(
                        choices=[("DEBIT", "Debit"), ("CREDIT", "Credit")],
                        max_length=10,
                    ),
                ),
                (
                    "is_system",
                    models.BooleanField(
                        default=False,
                        help_text="Seeded at store installation; system accounts cannot be deleted",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        db_column="parent_uuid",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="accounting.account",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        db_column="store_uuid",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="accounts",
                        to="store.store",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "db_table": "account",
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["store", "code"], name="account_store_code_idx"),
                    models.Index(fields=["store", "category"], name="account_store_cat_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("store", "code"),
                        name="uniq_account_store_code",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("code", ""), _negated=True),
                        name="chk_account_code_not_blank",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(("name", ""), _negated=True),
                        name="chk_account_name_not_blank",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Journal",
            fields=[
                (
                    "uuid",
                    models.CharField(
                        editable=False,
                        max_length=120,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        help_text="{TYPE}-{storeUuid}-{YYYYMMDD}-{seq:04d}",
                        max_length=150,
                        unique=True,
                    ),
                ),
                ("created_by", models.CharField(blank=True, default="", max_length=60)),
                ("verified_by", models.CharField(blank=True, max_length=60, null=True)),
                ("verified_at", models.DateTimeField(blank=True, null=True)),
                (
                    "created_at",
                    models.DateTimeField(
                        db_index=True, default=django.utils.timezone.now
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal",
                "verbose_name_plural": "Journals",
                "db_table": "journal",
                "ordering": ["-created_at", "-code"],
            },
        ),
        migrations.CreateModel(
            name="JournalDetail",
            fields=[
                (
                    "uuid",
                    models.CharField(
                        editable=False,
                        max_length=120,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("key", models.CharField(max_length=255)),
                ("value", models.TextField(blank=True, default="")),
                ("position", models.PositiveIntegerField(default=0)),
                ("created_by", models.CharField(blank=True, default="", max_length=60)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "journal",
                    models.ForeignKey(
                        db_column="journal_code",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="details",
                        to="accounting.journal",
                        to_field="code",
                    ),
                ),
            ],
            options={
                "db_table": "journal_detail",
                "ordering": ["journal_id", "position"],
                "indexes": [
                    models.Index(fields=["key"], name="journal_detail_key_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalConfig",
            fields=[
                (
                    "uuid",
                    models.CharField(
                        editable=False,
                        max_length=120,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("transaction_type", models.CharField(max_length=50)),
                ("detail_key", models.CharField(max_length=100)),
                (
                    "match_mode",
                    models.CharField(
                        blank=True,
                        choices=[("EXACT", "Exact key"), ("PREFIX", "Key prefix")],
                        default="",
                        max_length=10,
                    ),
                ),
                (
                    "position",
                    models.CharField(
                        choices=[("DEBIT", "Debit"), ("CREDIT", "Credit")],
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("deleted_at", models.DateTimeField(blank=True, null=True)),
                ("created_by", models.CharField(blank=True, max_length=60, null=True)),
                ("updated_by", models.CharField(blank=True, max_length=60, null=True)),
                ("deleted_by", models.CharField(blank=True, max_length=60, null=True)),
                (
                    "account",
                    models.ForeignKey(
                        db_column="account_uuid",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="journal_configs",
                        to="accounting.account",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        db_column="store_uuid",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="journal_configs",
                        to="store.store",
                    ),
                ),
            ],
            options={
                "db_table": "journal_config",
                "ordering": ["transaction_type", "detail_key", "position"],
                "indexes": [
                    models.Index(
                        fields=["store", "transaction_type", "detail_key"],
                        name="journal_config_lookup_idx",
                    ),
                ],
            },
        ),
    ]
