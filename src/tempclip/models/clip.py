from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Clip:
    """Immutable snapshot of a shared clip as held by the store."""
    id: str
    content: str
    created_at: datetime
    expires_at: datetime
    revoked: bool = False

    def is_live(self, now: datetime) -> bool:
        return not self.revoked and now < self.expires_at

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at <= now


@dataclass(frozen=True)
class ClipStats:
    total: int
    active: int
