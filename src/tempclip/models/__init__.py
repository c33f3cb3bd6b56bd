from tempclip.models.clip import Clip, ClipStats
from tempclip.models.clip_event import ClipEvent, ClipEventKind

__all__ = [
    'Clip',
    'ClipStats',
    'ClipEvent',
    'ClipEventKind',
]
