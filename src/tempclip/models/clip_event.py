from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict


class ClipEventKind(str, Enum):
    REVOKED = "revoked"
    EXPIRED = "expired"


@dataclass(frozen=True)
class ClipEvent:
    """Terminal state change delivered to observers of a single clip."""
    event: ClipEventKind
    id: str
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.event.value,
            "id": self.id,
            "timestamp": self.timestamp.isoformat()
        }
