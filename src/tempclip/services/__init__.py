"""Service layer for TempClip."""

from .eviction_service import EvictionService, LazyEviction
from .notifier import InvalidationNotifier, Subscription

__all__ = ["EvictionService", "LazyEviction", "InvalidationNotifier", "Subscription"]
