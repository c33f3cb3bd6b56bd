"""Invalidation notifier for TempClip.

Observers subscribe to a single clip id and receive at most one terminal
event for it: ``revoked`` or ``expired``. Once an id has fired, its
subscriber list is dropped and later subscriptions stay silent. Delivery is
best-effort; an observer that misses a push is expected to re-check the clip
through the store.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from ulid import ULID

from tempclip.models import ClipEvent, ClipEventKind
from tempclip.utils.clock import Clock, utcnow

logger = logging.getLogger(__name__)

EventCallback = Callable[[ClipEvent], None]


@dataclass(frozen=True)
class Subscription:
    clip_id: str
    callback: EventCallback = field(compare=False, repr=False)
    token: str = field(default_factory=lambda: f"s_{ULID()}")
    active: bool = True


class InvalidationNotifier:
    """Per-clip publish/subscribe registry for terminal clip events."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or utcnow
        self._lock = threading.RLock()
        self._subscribers: Dict[str, List[Subscription]] = defaultdict(list)
        self._terminal: Dict[str, ClipEvent] = {}

    # ------------------------------------------------------------------
    # Observer side
    # ------------------------------------------------------------------
    def subscribe(
        self, clip_id: str, callback: EventCallback, *, register: bool = True
    ) -> Subscription:
        """Register ``callback`` for the terminal event of ``clip_id``.

        Subscribing after the event already fired, or with ``register=False``,
        is allowed; the returned subscription is inactive and never triggers.
        Active subscriptions to ids the store does not hold stay registered
        until ``unsubscribe``; ``ClipStore.subscribe`` checks existence first.
        """

        with self._lock:
            if not register or clip_id in self._terminal:
                subscription = Subscription(clip_id=clip_id, callback=callback, active=False)
                logger.debug("Subscription %s for gone clip ignored", subscription.token)
                return subscription
            subscription = Subscription(clip_id=clip_id, callback=callback)
            self._subscribers[clip_id].append(subscription)
        logger.debug("Subscription %s registered", subscription.token)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        with self._lock:
            subscribers = self._subscribers.get(subscription.clip_id)
            if not subscribers or subscription not in subscribers:
                return False
            subscribers.remove(subscription)
            if not subscribers:
                del self._subscribers[subscription.clip_id]
        logger.debug("Subscription %s removed", subscription.token)
        return True

    def subscriber_count(self, clip_id: str) -> int:
        with self._lock:
            return len(self._subscribers.get(clip_id, ()))

    def has_fired(self, clip_id: str) -> bool:
        with self._lock:
            return clip_id in self._terminal

    # ------------------------------------------------------------------
    # Publisher side
    # ------------------------------------------------------------------
    def publish(self, clip_id: str, kind: ClipEventKind) -> int:
        """Fire the terminal event for ``clip_id``; returns deliveries made."""

        with self._lock:
            if clip_id in self._terminal:
                return 0
            event = ClipEvent(event=kind, id=clip_id, timestamp=self._clock())
            self._terminal[clip_id] = event
            subscribers = self._subscribers.pop(clip_id, [])

        delivered = 0
        for subscription in subscribers:
            try:
                subscription.callback(event)
                delivered += 1
            except Exception:
                logger.exception("Clip event callback raised (%s)", subscription.token)

        if subscribers:
            logger.info("Clip %s: notified %d observer(s)", kind.value, delivered)
        return delivered

    def notify_revoked(self, clip_id: str) -> int:
        return self.publish(clip_id, ClipEventKind.REVOKED)

    def notify_expired(self, clip_id: str) -> int:
        return self.publish(clip_id, ClipEventKind.EXPIRED)

    def forget(self, clip_id: str) -> None:
        """Drop the terminal marker of a clip the store no longer holds."""

        with self._lock:
            self._terminal.pop(clip_id, None)
