"""Audio clip sources package."""

from .clip import AudioClip, load_clip

__all__ = [
    "AudioClip",
    "load_clip",
]
