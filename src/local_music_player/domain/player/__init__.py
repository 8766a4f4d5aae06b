"""
Player Bounded Context

Domain logic for the track queue, playback modes and transport state.
"""

from local_music_player.domain.player.entities import PlaybackSession, Track
from local_music_player.domain.player.repository import SnapshotRepository, TrackCatalog
from local_music_player.domain.player.services import PlaybackModeService
from local_music_player.domain.player.snapshot import SessionSnapshot
from local_music_player.domain.player.value_objects import (
    AdvanceReason,
    LoadOutcome,
    PlaybackMode,
    TransportState,
)

__all__ = [
    # Entities
    "Track",
    "PlaybackSession",
    # Value Objects
    "PlaybackMode",
    "TransportState",
    "LoadOutcome",
    "AdvanceReason",
    "SessionSnapshot",
    # Repository
    "TrackCatalog",
    "SnapshotRepository",
    # Services
    "PlaybackModeService",
]
