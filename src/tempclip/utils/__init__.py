from tempclip.utils.clock import Clock, utcnow
from tempclip.utils.expiry import DURATION_MINUTES, resolve_expiry
from tempclip.utils.ids import new_clip_id

__all__ = [
    'Clock',
    'utcnow',
    'DURATION_MINUTES',
    'resolve_expiry',
    'new_clip_id',
]
