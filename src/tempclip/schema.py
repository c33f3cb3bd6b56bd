from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from tempclip.models import Clip, ClipStats

ExpiryDuration = Literal["2min", "5min", "10min", "1hour", "24hour"]


class CreateClipRequest(BaseModel):
    content: str = Field(min_length=1)
    expiryDuration: Optional[ExpiryDuration] = None
    customExpiry: Optional[str] = None  # ISO-8601, wins over expiryDuration


class ClipCreated(BaseModel):
    success: bool = True
    id: str
    expiresAt: datetime


class ClipView(BaseModel):
    success: bool = True
    content: str
    expiresAt: datetime
    createdAt: datetime

    @classmethod
    def from_clip(cls, clip: Clip) -> "ClipView":
        return cls(content=clip.content, expiresAt=clip.expires_at, createdAt=clip.created_at)


class StorageStats(BaseModel):
    totalClips: int
    activeClips: int

    @classmethod
    def from_stats(cls, stats: ClipStats) -> "StorageStats":
        return cls(totalClips=stats.total, activeClips=stats.active)


class Message(BaseModel):
    success: bool
    message: str
