# accounting/models/__init__.py

"""
ACCOUNTING MODELS PACKAGE EXPORTS

Note:
- Keep this file *imports-only* (no business logic).
- Do NOT import services from models anywhere (models must stay pure).
"""

from accounting.models.account import Account
from accounting.models.journal import Journal, JournalDetail
from accounting.models.journal_config import JournalConfig

__all__ = [
    "Account",
    "Journal",
    "JournalDetail",
    "JournalConfig",
]
