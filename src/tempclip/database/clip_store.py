from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, Optional, Tuple, TYPE_CHECKING

from tempclip.errors import ClipValidationError
from tempclip.models import Clip, ClipStats
from tempclip.services.eviction_service import LazyEviction
from tempclip.services.notifier import EventCallback, InvalidationNotifier, Subscription
from tempclip.utils.clock import Clock, utcnow
from tempclip.utils.ids import new_clip_id

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from tempclip.config import TempClipConfig

logger = logging.getLogger(__name__)


class ClipStore:
    """Process-local holder of every clip and the only place they change.

    Reads go through a validity gate: expired clips are removed on sight and
    revoked clips are hidden but kept until ``cleanup`` reclaims them. Every
    operation runs under one re-entrant lock, and terminal events are
    published while that lock is held so observers never see a state the
    store has not committed.
    """

    def __init__(
        self,
        notifier: Optional[InvalidationNotifier] = None,
        *,
        max_content_length: int = 1_000_000,
        id_length: int = 24,
        clock: Optional[Clock] = None,
        lazy_eviction: Optional[LazyEviction] = None,
    ) -> None:
        self.max_content_length = max_content_length
        self.id_length = id_length
        self._clock = clock or utcnow
        self._notifier = notifier or InvalidationNotifier(clock=self._clock)
        self._lazy = lazy_eviction
        self._lock = threading.RLock()
        self._clips: Dict[str, Clip] = {}

    @classmethod
    def from_config(
        cls,
        config: "TempClipConfig",
        notifier: Optional[InvalidationNotifier] = None,
        clock: Optional[Clock] = None,
    ) -> "ClipStore":
        lazy = LazyEviction(config.lazy_cleanup_interval) if config.lazy_cleanup else None
        return cls(
            notifier=notifier,
            max_content_length=config.max_content_length,
            id_length=config.id_length,
            clock=clock,
            lazy_eviction=lazy,
        )

    @property
    def notifier(self) -> InvalidationNotifier:
        return self._notifier

    def now(self) -> datetime:
        return self._clock()

    def create(self, content: str, expires_at: datetime) -> Tuple[str, Clip]:
        now = self._clock()
        expires_at = self._validate(content, expires_at, now)

        self._maybe_cleanup()

        with self._lock:
            clip_id = new_clip_id(self.id_length)
            while clip_id in self._clips:
                clip_id = new_clip_id(self.id_length)

            clip = Clip(
                id=clip_id,
                content=content,
                created_at=now,
                expires_at=expires_at,
            )
            self._clips[clip_id] = clip

        logger.info(
            f"Clip created: {len(content)} chars, expires {expires_at.isoformat()}")
        return clip_id, clip

    def get(self, clip_id: str) -> Optional[Clip]:
        self._maybe_cleanup()

        with self._lock:
            clip = self._clips.get(clip_id)
            if clip is None:
                return None

            if clip.is_expired(self._clock()):
                self._evict(clip)
                return None

            if clip.revoked:
                return None

            return clip

    def revoke(self, clip_id: str) -> bool:
        with self._lock:
            clip = self._clips.get(clip_id)
            if clip is None:
                return False

            if clip.is_expired(self._clock()):
                self._evict(clip)
                return False

            if not clip.revoked:
                self._clips[clip_id] = replace(clip, revoked=True)
                self._notifier.notify_revoked(clip_id)
                logger.info("Clip revoked")

            return True

    def cleanup(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [clip for clip in self._clips.values() if clip.is_expired(now)]
            for clip in expired:
                self._evict(clip)

        if expired:
            logger.info(f"Cleanup removed {len(expired)} expired clip(s)")
        return len(expired)

    def subscribe(self, clip_id: str, callback: EventCallback) -> Subscription:
        """Subscribe to a clip's terminal event if it is still live.

        Runs under the store lock, so no revoke or cleanup can slip between
        the check and the registration. For a clip that is not live the
        subscription comes back inactive and nothing is kept.
        """
        with self._lock:
            clip = self._clips.get(clip_id)
            live = clip is not None and clip.is_live(self._clock())
            return self._notifier.subscribe(clip_id, callback, register=live)

    def stats(self) -> ClipStats:
        with self._lock:
            now = self._clock()
            active = sum(1 for clip in self._clips.values() if clip.is_live(now))
            return ClipStats(total=len(self._clips), active=active)

    def __len__(self) -> int:
        with self._lock:
            return len(self._clips)

    def _validate(self, content: str, expires_at: datetime, now: datetime) -> datetime:
        if not isinstance(content, str) or not content:
            raise ClipValidationError("Content cannot be empty")
        if len(content) > self.max_content_length:
            raise ClipValidationError(
                f"Content too large (max {self.max_content_length} characters)")

        if not isinstance(expires_at, datetime):
            raise ClipValidationError("Expiry must be a datetime")
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at <= now:
            raise ClipValidationError("Expiry must be in the future")
        return expires_at

    def _evict(self, clip: Clip) -> None:
        # caller holds self._lock
        del self._clips[clip.id]
        if not clip.revoked:
            self._notifier.notify_expired(clip.id)
        self._notifier.forget(clip.id)

    def _maybe_cleanup(self) -> None:
        if self._lazy is not None and self._lazy.due():
            self.cleanup()
