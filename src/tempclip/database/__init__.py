"""
Storage Package for TempClip.

Provides the in-memory clip store.
"""

from tempclip.database.clip_store import ClipStore

__all__ = [
    'ClipStore',
]
