"""Track catalog implementations."""

from local_music_player.infrastructure.catalog.in_memory import InMemoryTrackCatalog

__all__ = ["InMemoryTrackCatalog"]
