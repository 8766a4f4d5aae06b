"""Audio infrastructure - libVLC engine."""

from local_music_player.infrastructure.audio.vlc_engine import VlcAudioEngine

__all__ = ["VlcAudioEngine"]
