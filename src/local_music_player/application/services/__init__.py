"""Application services."""

from local_music_player.application.services.autosave import SnapshotAutosaver
from local_music_player.application.services.player_session import PlayerSession

__all__ = [
    "PlayerSession",
    "SnapshotAutosaver",
]
