"""TempClip: short-lived private text clips with live invalidation."""

__version__ = "0.1.0"
