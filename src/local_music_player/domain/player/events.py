"""Domain events published by the playback session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from local_music_player.domain.shared.events import DomainEvent
from local_music_player.domain.shared.types import (
    DurationSeconds,
    NonNegativeInt,
    PositionSeconds,
    QueueIndex,
    UnitInterval,
)

from .value_objects import AdvanceReason, PlaybackMode, TransportState

if TYPE_CHECKING:
    from .entities import Track


class TrackChanged(DomainEvent):
    """The current-track pointer moved to another track (or to nothing)."""

    event_type: Literal["TrackChanged"] = "TrackChanged"
    track_id: str | None = None
    track_title: str = ""
    index: QueueIndex = -1
    reason: AdvanceReason = AdvanceReason.USER_REQUEST

    @classmethod
    def from_track(
        cls, track: Track | None, index: int, reason: AdvanceReason
    ) -> TrackChanged:
        """Create event from a Track entity."""
        if track is None:
            return cls(index=-1, reason=reason)
        return cls(
            track_id=track.id,
            track_title=track.display_title,
            index=index,
            reason=reason,
        )


class TransportStateChanged(DomainEvent):
    event_type: Literal["TransportStateChanged"] = "TransportStateChanged"
    previous: TransportState
    current: TransportState


class QueueChanged(DomainEvent):
    event_type: Literal["QueueChanged"] = "QueueChanged"
    length: NonNegativeInt
    current_index: QueueIndex


class PositionUpdated(DomainEvent):
    event_type: Literal["PositionUpdated"] = "PositionUpdated"
    position: PositionSeconds
    duration: DurationSeconds = 0.0


class VolumeChanged(DomainEvent):
    event_type: Literal["VolumeChanged"] = "VolumeChanged"
    volume: UnitInterval


class PlaybackModeChanged(DomainEvent):
    event_type: Literal["PlaybackModeChanged"] = "PlaybackModeChanged"
    mode: PlaybackMode


class PlaybackFailed(DomainEvent):
    """A track could not be loaded or played."""

    event_type: Literal["PlaybackFailed"] = "PlaybackFailed"
    track_id: str | None = None
    code: str
    message: str
    will_retry: bool = False


class QueueExhausted(DomainEvent):
    event_type: Literal["QueueExhausted"] = "QueueExhausted"
    last_track_id: str | None = None


class SessionRestored(DomainEvent):
    event_type: Literal["SessionRestored"] = "SessionRestored"
    track_count: NonNegativeInt
    dropped_count: NonNegativeInt = 0
    current_index: QueueIndex = -1


class SnapshotSaved(DomainEvent):
    event_type: Literal["SnapshotSaved"] = "SnapshotSaved"
    track_count: NonNegativeInt
