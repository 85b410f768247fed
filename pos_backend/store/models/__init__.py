# store/models/__init__.py

from store.models.store import Store

__all__ = ["Store"]
