from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from tempclip.errors import ClipValidationError

DURATION_MINUTES: Dict[str, int] = {
    "2min": 2,
    "5min": 5,
    "10min": 10,
    "1hour": 60,
    "24hour": 1440,
}

DEFAULT_DURATION = "10min"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        raise ClipValidationError(f"Invalid expiry timestamp: {value!r}") from None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_expiry(
    now: datetime,
    expiry_duration: Optional[str] = None,
    custom_expiry: Optional[str] = None,
) -> datetime:
    # explicit timestamp wins over the duration menu
    if custom_expiry:
        expires_at = parse_timestamp(custom_expiry)
        if expires_at <= now:
            raise ClipValidationError("Custom expiry must be in the future")
        return expires_at

    token = expiry_duration or DEFAULT_DURATION
    minutes = DURATION_MINUTES.get(token)
    if minutes is None:
        raise ClipValidationError(
            f"Unknown expiry duration {token!r}; expected one of {', '.join(DURATION_MINUTES)}")
    return now + timedelta(minutes=minutes)
