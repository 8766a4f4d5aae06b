"""Serializable representation of a playback session."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from local_music_player.domain.player.value_objects import PlaybackMode
from local_music_player.domain.shared.constants import SnapshotDefaults
from local_music_player.domain.shared.types import (
    PositionSeconds,
    TrackIdStr,
    UnitInterval,
)


class SessionSnapshot(BaseModel):
    """Value captured by the session for crash-safe persistence.

    Field names serialize in camelCase so snapshots written by earlier
    releases of the desktop player load unchanged.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    current_track_id: TrackIdStr | None = Field(default=None, alias="currentTrackId")
    position: PositionSeconds = SnapshotDefaults.POSITION
    is_playing: bool = Field(default=False, alias="isPlaying")
    volume: UnitInterval = SnapshotDefaults.VOLUME
    mode: PlaybackMode = Field(
        default=PlaybackMode(SnapshotDefaults.MODE), alias="playbackMode"
    )
    queue_track_ids: tuple[TrackIdStr, ...] = Field(default=(), alias="queueTrackIds")
    queue_index: int = Field(default=SnapshotDefaults.QUEUE_INDEX, alias="queueIndex")

    @classmethod
    def default(cls) -> SessionSnapshot:
        """Snapshot used when nothing usable is persisted."""
        return cls()

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
